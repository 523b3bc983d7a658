"""Application settings, read from the environment with development defaults."""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    DATA_PATH = os.getenv("DATA_PATH", str(BASE_DIR / "data.pkl"))

    # Bearer tokens expire after this many seconds
    TOKEN_MAX_AGE = int(os.getenv("TOKEN_MAX_AGE", "3600"))

    # Zone used to decide what "today" is for bookings and the dashboard
    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Admin account created when the store starts empty
    DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@carrental.local")
    DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "Admin@1234")


class TestConfig(Config):
    __test__ = False
    TESTING = True
    SECRET_KEY = "test"
    DEFAULT_ADMIN_EMAIL = None
    DEFAULT_ADMIN_PASSWORD = None
