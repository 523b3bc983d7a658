"""Date helpers tied to the configured application timezone."""
from datetime import date, datetime

import pytz
from flask import current_app, has_app_context

from ..config import Config


def app_timezone():
    name = Config.APP_TIMEZONE
    if has_app_context():
        name = current_app.config.get("APP_TIMEZONE", name)
    return pytz.timezone(name)


def local_today(tz_name: str | None = None) -> date:
    """Today's date in `tz_name`, or in the app's configured zone."""
    tz = pytz.timezone(tz_name) if tz_name else app_timezone()
    return datetime.now(tz).date()


def utc_now_iso() -> str:
    return datetime.now(pytz.utc).isoformat(timespec="seconds")


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; 0 when end precedes start."""
    if end < start:
        return 0
    return (end - start).days + 1


def overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between the closed ranges [a_start, a_end] and [b_start, b_end].
    Both ends are booked days: 2030-01-10 -> 2030-01-15 and 2030-01-15 -> 2030-01-18
    share the 15th and therefore collide.
    """
    return a_start <= b_end and a_end >= b_start
