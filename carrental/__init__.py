import logging

from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import Config
from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.cars import bp as cars_bp
from .controllers.customers import bp as customers_bp
from .controllers.dashboard import bp as dashboard_bp
from .exceptions import RentalAppError
from .models.store import Store
from .utils.responses import envelope, failure

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask):
    @app.errorhandler(RentalAppError)
    def handle_app_error(err: RentalAppError):
        return failure(err.message, err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return failure(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error: %s", err)
        return failure("Internal server error", 500)


def create_app(config=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config or Config)
    app.config.update(overrides)

    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    CORS(app, origins=app.config["CORS_ORIGINS"])

    # load the pickle file or init default
    Store.configure(
        app.config["DATA_PATH"],
        admin_email=app.config.get("DEFAULT_ADMIN_EMAIL"),
        admin_password=app.config.get("DEFAULT_ADMIN_PASSWORD"),
    )

    app.register_blueprint(auth_bp)
    app.register_blueprint(cars_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(dashboard_bp)
    register_error_handlers(app)

    @app.get("/")
    def health():
        return envelope(None, "Car Rental Backend API is running...")

    return app
