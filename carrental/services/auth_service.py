from __future__ import annotations

import logging

from ..exceptions import (
    AuthenticationError,
    DuplicateRecordError,
    UserNotFoundError,
    ValidationError,
)
from ..utils.constants import Role
from ..utils.security import check_hash, generate_hash, issue_token
from ..utils.validators import check_password_strength, clean_str, require_fields, valid_email
from . import common

logger = logging.getLogger(__name__)

REGISTER_FIELDS = ("email", "password", "name", "mobile_no", "customer_city")


class AuthService:
    """Registration, login/logout and the caller's own profile."""

    @staticmethod
    def register(payload: dict) -> dict:
        """
        Create a User (always role 'user') and the Customer profile sharing its id.
        """
        require_fields(payload, REGISTER_FIELDS)
        email = clean_str(payload.get("email")).lower()
        password = payload.get("password") or ""
        name = clean_str(payload.get("name"))
        mobile_no = clean_str(payload.get("mobile_no"))
        city = clean_str(payload.get("customer_city"))

        if not valid_email(email):
            raise ValidationError("Invalid email format.")
        check_password_strength(password)

        store = common._store()
        with store.locked():
            if store.user_exists(email):
                raise DuplicateRecordError("User account already exists with this email.")
            if store.find_customer(email=email, mobile_no=mobile_no):
                raise DuplicateRecordError(
                    "A customer profile linked to this email or mobile number already exists.")

            uid = store.create_user(email, generate_hash(password), name, Role.USER)
            try:
                store.create_customer({
                    "customer_name": name,
                    "customer_city": city,
                    "mobile_no": mobile_no,
                    "email": email,
                }, customer_id=uid)
            except DuplicateRecordError:
                store.delete_user(uid)
                raise

        logger.info("Registered user %s", email)
        return common.public_user(store.get_user(uid))

    @staticmethod
    def login(email: str, password: str, secret_key: str) -> tuple[str, dict]:
        """Return (token, public user) for valid credentials."""
        store = common._store()
        user = store.find_user(clean_str(email))
        if not user or not isinstance(password, str) or not check_hash(password, user["password_hash"]):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid credentials")
        logger.info("User %s logged in", user["email"])
        return issue_token(secret_key, user), common.public_user(user)

    @staticmethod
    def logout(token: str, expires_at: float):
        """Revoke `token` until it would have expired anyway."""
        common._store().revoke_token(token, expires_at)

    @staticmethod
    def profile(user_id: str) -> dict:
        store = common._store()
        user = store.get_user(user_id)
        if not user:
            raise UserNotFoundError()
        return {
            "user": common.public_user(user),
            "customer": store.get_customer(user_id),
        }

    @staticmethod
    def update_profile(user_id: str, payload: dict) -> dict:
        """
        Update name/email/password on the User and the matching Customer together.
        Changing the password requires the current one.
        """
        store = common._store()
        with store.locked():
            user = store.get_user(user_id)
            if not user:
                raise UserNotFoundError()

            name = clean_str(payload.get("name")) or None
            email = clean_str(payload.get("email")).lower() or None
            mobile_no = clean_str(payload.get("mobile_no")) or None
            city = clean_str(payload.get("customer_city")) or None
            new_password = payload.get("new_password")

            password_hash = None
            if new_password:
                current = payload.get("current_password")
                if not current:
                    raise ValidationError("Current password is required to change password.")
                if not check_hash(current, user["password_hash"]):
                    raise ValidationError("Invalid current password.")
                check_password_strength(new_password)
                password_hash = generate_hash(new_password)

            if email and email != user["email"]:
                if not valid_email(email):
                    raise ValidationError("Invalid email format.")
                other = store.find_user(email)
                if other and other["user_id"] != user_id:
                    raise DuplicateRecordError("Email is already in use by another user.")
                other = store.find_customer(email=email)
                if other and other["customer_id"] != user_id:
                    raise DuplicateRecordError("Email is already in use by another customer.")
            if mobile_no:
                other = store.find_customer(mobile_no=mobile_no)
                if other and other["customer_id"] != user_id:
                    raise DuplicateRecordError("Mobile number is already registered to another customer.")

            updated = store.update_user(user_id, name=name, email=email, password_hash=password_hash)
            if store.get_customer(user_id):
                store.update_customer(user_id, customer_name=name, email=email,
                                      mobile_no=mobile_no, customer_city=city)

        logger.info("Profile updated for user %s", updated["email"])
        return common.public_user(updated)
