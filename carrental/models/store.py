import logging
import os
import pickle
import threading
import time
import uuid
from pathlib import Path

from ..config import Config
from ..exceptions import DuplicateRecordError
from ..utils.dates import utc_now_iso
from ..utils.security import generate_hash
from ..utils.constants import Role

logger = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"

COLLECTIONS = ("users", "customers", "cars", "bookings")

# (collection, field, case_insensitive)
UNIQUE_KEYS = (
    ("users", "email", True),
    ("customers", "email", True),
    ("customers", "mobile_no", False),
    ("cars", "reg_no", True),
)


def _norm(value, case_insensitive: bool):
    s = str(value or "").strip()
    return s.lower() if case_insensitive else s


def _revocations(raw) -> dict[str, float]:
    """Revocation map from a stored value; older files kept a bare set of tokens."""
    if isinstance(raw, dict):
        return {str(t): float(exp) for t, exp in raw.items()}
    # No recorded expiry: keep them for one full token lifetime from now
    expires_at = time.time() + Config.TOKEN_MAX_AGE
    return {str(t): expires_at for t in raw or ()}


class Store:
    """
    Document store with one dict per collection, keyed by string id.
    Every write is flushed to a pickle file with an atomic replace.
    """

    _inst = None
    _inst_lock = threading.Lock()

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.users: dict[str, dict] = {}
        self.customers: dict[str, dict] = {}
        self.cars: dict[str, dict] = {}
        self.bookings: dict[str, dict] = {}
        self.revoked_tokens: dict[str, float] = {}  # token -> expires_at
        self._rw = threading.RLock()

        logger.info("Using store file %s", self.path)
        self._load()

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH)
        return cls._inst

    @classmethod
    def configure(cls, path: str | os.PathLike, admin_email: str | None = None,
                  admin_password: str | None = None):
        """Replace the singleton with a store backed by `path`."""
        store = Store(path)
        if admin_email and admin_password:
            store.ensure_admin(admin_email, admin_password)
        with cls._inst_lock:
            cls._inst = store
        return store

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("Store load failed (%s); starting empty.", e)
            return

        if isinstance(data, dict) and all(isinstance(data.get(c, {}), dict) for c in COLLECTIONS):
            for name in COLLECTIONS:
                setattr(self, name, data.get(name) or {})
            self.revoked_tokens = _revocations(data.get("revoked_tokens"))
            self._prune_revoked()
            logger.info(
                "Loaded: users=%d, customers=%d, cars=%d, bookings=%d",
                len(self.users), len(self.customers), len(self.cars), len(self.bookings),
            )
        else:
            # Incompatible data format: back up the old file and start empty
            bak = self.path + ".bak"
            os.replace(self.path, bak)
            logger.warning("Incompatible store (%s); backed up to %s. Starting empty.",
                           type(data).__name__, bak)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        payload = {name: getattr(self, name) for name in COLLECTIONS}
        payload["revoked_tokens"] = self.revoked_tokens
        with open(tmp, "wb") as f:
            pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            logger.debug("Saving to %s", self.path)
            self._dump()

    def locked(self):
        """Hold the store lock across a read-check-write sequence."""
        return self._rw

    def clear(self):
        """Drop every document and revoked token."""
        with self._rw:
            for name in COLLECTIONS:
                getattr(self, name).clear()
            self.revoked_tokens.clear()
            self._dump()

    # ---------- Unique keys ----------
    def _check_unique(self, collection: str, doc: dict, exclude_id: str | None = None):
        id_field = collection[:-1] + "_id"
        for coll, field, ci in UNIQUE_KEYS:
            if coll != collection or not doc.get(field):
                continue
            wanted = _norm(doc[field], ci)
            for other in getattr(self, collection).values():
                if other.get(id_field) == exclude_id:
                    continue
                if _norm(other.get(field), ci) == wanted:
                    raise DuplicateRecordError(f"A {collection[:-1]} with this {field} already exists")

    def _insert(self, collection: str, doc: dict, doc_id: str | None = None) -> str:
        with self._rw:
            self._check_unique(collection, doc)
            did = doc_id or str(uuid.uuid4())
            coll = getattr(self, collection)
            if did in coll:
                raise DuplicateRecordError(f"A {collection[:-1]} with this id already exists")
            doc = dict(doc)
            doc[collection[:-1] + "_id"] = did
            doc.setdefault("created_at", utc_now_iso())
            coll[did] = doc
            self._dump()
            return did

    def _update(self, collection: str, doc_id: str, updates: dict) -> dict | None:
        with self._rw:
            coll = getattr(self, collection)
            current = coll.get(str(doc_id))
            if current is None:
                return None
            merged = dict(current)
            merged.update({k: v for k, v in updates.items() if v is not None})
            self._check_unique(collection, merged, exclude_id=str(doc_id))
            coll[str(doc_id)] = merged
            self._dump()
            return merged

    def _delete(self, collection: str, doc_id: str) -> bool:
        with self._rw:
            coll = getattr(self, collection)
            if str(doc_id) in coll:
                del coll[str(doc_id)]
                self._dump()
                return True
            return False

    # ---------- Users ----------
    def user_exists(self, email: str) -> bool:
        """Return True if an account already uses this email."""
        return self.find_user(email) is not None

    def find_user(self, email: str) -> dict | None:
        """Find a user by email (case-insensitive)."""
        wanted = _norm(email, True)
        for u in self.users.values():
            if _norm(u.get("email"), True) == wanted:
                return u
        return None

    def get_user(self, user_id: str) -> dict | None:
        return self.users.get(str(user_id))

    def create_user(self, email: str, password_hash: str, name: str, role: str) -> str:
        """Create a new user and return its ID."""
        return self._insert("users", {
            "email": email.strip().lower(),
            "password_hash": password_hash,
            "name": name,
            "role": role,
        })

    def update_user(self, user_id: str, **updates) -> dict | None:
        if updates.get("email"):
            updates["email"] = updates["email"].strip().lower()
        return self._update("users", user_id, updates)

    def delete_user(self, user_id: str) -> bool:
        return self._delete("users", user_id)

    def ensure_admin(self, email: str, password: str) -> str:
        """Create the bootstrap admin unless any admin account exists."""
        for u in self.users.values():
            if u.get("role") == Role.ADMIN:
                return u["user_id"]
        logger.info("Creating default admin account %s", email)
        return self.create_user(email, generate_hash(password), "Administrator", Role.ADMIN)

    # ---------- Customers ----------
    def find_customer(self, email: str | None = None, mobile_no: str | None = None,
                      name: str | None = None) -> dict | None:
        """Return the first customer matching any of the given keys."""
        for c in self.customers.values():
            if email and _norm(c.get("email"), True) == _norm(email, True):
                return c
            if mobile_no and _norm(c.get("mobile_no"), False) == _norm(mobile_no, False):
                return c
            if name and c.get("customer_name") == name:
                return c
        return None

    def get_customer(self, customer_id: str) -> dict | None:
        return self.customers.get(str(customer_id))

    def create_customer(self, data: dict, customer_id: str | None = None) -> str:
        """Create a customer; pass `customer_id` to share the id of a User."""
        return self._insert("customers", {
            "customer_name": data.get("customer_name", ""),
            "customer_city": data.get("customer_city", ""),
            "mobile_no": data.get("mobile_no", ""),
            "email": (data.get("email") or "").strip().lower(),
        }, doc_id=customer_id)

    def update_customer(self, customer_id: str, **updates) -> dict | None:
        if updates.get("email"):
            updates["email"] = updates["email"].strip().lower()
        return self._update("customers", customer_id, updates)

    def delete_customer(self, customer_id: str) -> bool:
        return self._delete("customers", customer_id)

    # ---------- Cars ----------
    def create_car(self, data: dict) -> str:
        """Create a new car record and return its ID."""
        return self._insert("cars", {
            "brand": data.get("brand", ""),
            "model": data.get("model", ""),
            "year": data.get("year"),
            "color": data.get("color", ""),
            "daily_rate": float(data.get("daily_rate") or 0),
            "reg_no": data.get("reg_no", ""),
            "car_image": data.get("car_image", ""),
        })

    def get_car(self, car_id: str) -> dict | None:
        return self.cars.get(str(car_id))

    def update_car(self, car_id: str, **updates) -> dict | None:
        return self._update("cars", car_id, updates)

    def delete_car(self, car_id: str) -> bool:
        return self._delete("cars", car_id)

    # ---------- Bookings ----------
    def create_booking(self, data: dict) -> str:
        return self._insert("bookings", data)

    def get_booking(self, booking_id: str) -> dict | None:
        return self.bookings.get(str(booking_id))

    def update_booking(self, booking_id: str, updates: dict) -> dict | None:
        return self._update("bookings", booking_id, updates)

    def delete_booking(self, booking_id: str) -> bool:
        return self._delete("bookings", booking_id)

    def bookings_for_car(self, car_id: str) -> list[dict]:
        return [b for b in self.bookings.values() if b.get("car_id") == str(car_id)]

    def bookings_for_customer(self, customer_id: str) -> list[dict]:
        return [b for b in self.bookings.values() if b.get("customer_id") == str(customer_id)]

    # ---------- Tokens ----------
    def _prune_revoked(self, now: float | None = None) -> int:
        """Forget revoked tokens that have expired on their own."""
        now = time.time() if now is None else now
        expired = [t for t, exp in self.revoked_tokens.items() if exp <= now]
        for t in expired:
            del self.revoked_tokens[t]
        return len(expired)

    def revoke_token(self, token: str, expires_at: float):
        """Reject `token` until `expires_at` (POSIX seconds)."""
        with self._rw:
            dropped = self._prune_revoked()
            if expires_at > time.time():
                self.revoked_tokens[token] = expires_at
            elif not dropped:
                return
            self._dump()

    def is_token_revoked(self, token: str) -> bool:
        return token in self.revoked_tokens
