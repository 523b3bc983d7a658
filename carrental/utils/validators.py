"""Input checks shared by the auth, car, customer and booking services."""
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Optional

from ..exceptions import InvalidDateRangeError, ValidationError
from .constants import DATE_FMT, PASSWORD_MIN_LENGTH

# Compile once at module import
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_PATTERN = re.compile(r"[!@#$%^&*(),.?\":{}|<>_+=\-\[\]\\/]")


def clean_str(value: Any) -> str:
    """Strip a form value; None and non-strings become ''."""
    if value is None:
        return ""
    return str(value).strip()


def require_fields(payload: dict, fields: Iterable[str]) -> None:
    missing = [f for f in fields if not clean_str(payload.get(f))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def valid_email(email: Optional[str]) -> bool:
    return bool(email) and bool(EMAIL_PATTERN.match(email))


def password_problem(password: Any) -> Optional[str]:
    """Return why `password` is too weak, or None when it is acceptable."""
    if password is None:
        password = ""
    if not isinstance(password, str):
        return "Password must be a string."
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters long."
    if not (re.search(r"[A-Z]", password) and re.search(r"[a-z]", password)):
        return "Password must contain both uppercase and lowercase letters."
    if not re.search(r"\d", password):
        return "Password must include at least one number."
    if not SPECIAL_PATTERN.search(password):
        return "Password must include at least one special character."
    return None


def check_password_strength(password: Any) -> None:
    problem = password_problem(password)
    if problem:
        raise ValidationError(problem)


def parse_date(value: Any, field: str = "date") -> date:
    """Parse 'YYYY-MM-DD' (or an ISO datetime prefix) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = clean_str(value).split("T", 1)[0]
    try:
        return datetime.strptime(s, DATE_FMT).date()
    except ValueError:
        raise InvalidDateRangeError(f"Invalid {field} (expected YYYY-MM-DD)")


def to_float(value: Any, field: str) -> float:
    """Parse a finite number; NaN and infinities are rejected."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def to_int(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a whole number")


def to_float_safe(value) -> Optional[float]:
    """Safely convert to a finite float; return None if invalid."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
