"""Shared service helpers."""

from datetime import date
from typing import Optional

from ..models.store import Store
from ..utils.dates import local_today


def _store() -> Store:
    """Get the singleton store instance."""
    return Store.instance()


def _today() -> date:
    """Wrapper for easier testing/mocking."""
    return local_today()


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def public_user(u: Optional[dict]) -> Optional[dict]:
    """User document without its password hash."""
    if not u:
        return None
    return {
        "user_id": u.get("user_id"),
        "email": u.get("email"),
        "name": u.get("name"),
        "role": u.get("role"),
    }


def sort_by_start_desc(bookings):
    return sorted(bookings, key=lambda b: b.get("start_date") or "", reverse=True)


def has_current_bookings(bookings, today: date) -> bool:
    """True when any booking ends today or later."""
    cutoff = today.isoformat()
    return any((b.get("end_date") or "") >= cutoff for b in bookings)
