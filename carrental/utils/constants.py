# carrental/utils/constants.py

"""
Global constants for roles, date formats and response messages.
These constants are imported by both models and services.
"""

# Date format (used for booking start/end)
DATE_FMT = "%Y-%m-%d"


class Role:
    ADMIN = "admin"
    USER = "user"


# --- Misc ---
MIN_CAR_YEAR = 1900
PASSWORD_MIN_LENGTH = 8
BOOKING_UID_LENGTH = 8
TOKEN_SALT = "carrental-auth-token"
