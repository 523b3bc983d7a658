import pickle
import time

import pytest

from carrental.exceptions import DuplicateRecordError
from carrental.models.store import Store


def test_writes_survive_reload(tmp_path):
    path = tmp_path / "data.pkl"
    st = Store(path)
    uid = st.create_user("Eve@Example.com", "hash", "Eve", "user")
    st.create_customer({"customer_name": "Eve", "customer_city": "Goa",
                        "mobile_no": "9", "email": "eve@example.com"}, customer_id=uid)
    st.revoke_token("tok", time.time() + 60)

    again = Store(path)
    assert again.get_user(uid)["email"] == "eve@example.com"
    assert again.get_customer(uid)["customer_id"] == uid
    assert again.is_token_revoked("tok")


def test_unique_user_email(tmp_path):
    st = Store(tmp_path / "data.pkl")
    st.create_user("eve@example.com", "h", "Eve", "user")
    with pytest.raises(DuplicateRecordError):
        st.create_user("EVE@example.com", "h", "Eve 2", "user")


def test_update_keeps_fields_when_value_is_none(tmp_path):
    st = Store(tmp_path / "data.pkl")
    cid = st.create_car({"brand": "Kia", "model": "Rio", "year": 2020, "color": "Red",
                         "daily_rate": 20, "reg_no": "R1"})
    st.update_car(cid, color=None, daily_rate=25.0)
    car = st.get_car(cid)
    assert car["color"] == "Red" and car["daily_rate"] == 25.0


def test_incompatible_file_is_backed_up(tmp_path):
    path = tmp_path / "data.pkl"
    path.write_bytes(pickle.dumps(["not", "a", "store"]))
    st = Store(path)
    assert st.users == {} and st.cars == {}
    assert (tmp_path / "data.pkl.bak").exists()


def test_ensure_admin_is_idempotent(tmp_path):
    st = Store.configure(tmp_path / "data.pkl", "root@test.io", "Admin@1234")
    st.ensure_admin("other@test.io", "Admin@1234")
    admins = [u for u in st.users.values() if u["role"] == "admin"]
    assert [u["email"] for u in admins] == ["root@test.io"]


def test_clear_empties_everything(tmp_path):
    st = Store(tmp_path / "data.pkl")
    st.create_user("eve@example.com", "h", "Eve", "user")
    st.revoke_token("tok", time.time() + 60)
    st.clear()
    assert not st.users and not st.revoked_tokens
    assert not Store(tmp_path / "data.pkl").users


def test_expired_revocations_are_pruned_on_revoke(tmp_path):
    st = Store(tmp_path / "data.pkl")
    st.revoke_token("old", time.time() + 60)
    st.revoked_tokens["old"] = time.time() - 1
    st.revoke_token("new", time.time() + 60)
    assert set(st.revoked_tokens) == {"new"}
    assert not Store(tmp_path / "data.pkl").is_token_revoked("old")


def test_already_expired_token_is_not_recorded(tmp_path):
    st = Store(tmp_path / "data.pkl")
    st.revoke_token("gone", time.time() - 1)
    assert not st.is_token_revoked("gone")


def test_expired_revocations_are_pruned_on_load(tmp_path):
    path = tmp_path / "data.pkl"
    path.write_bytes(pickle.dumps({
        "users": {}, "customers": {}, "cars": {}, "bookings": {},
        "revoked_tokens": {"old": time.time() - 1, "live": time.time() + 60},
    }))
    st = Store(path)
    assert set(st.revoked_tokens) == {"live"}


def test_legacy_revocation_set_is_still_honoured(tmp_path):
    path = tmp_path / "data.pkl"
    path.write_bytes(pickle.dumps({
        "users": {}, "customers": {}, "cars": {}, "bookings": {},
        "revoked_tokens": {"tok"},
    }))
    st = Store(path)
    assert st.is_token_revoked("tok")
    assert st.revoked_tokens["tok"] > time.time()
