from __future__ import annotations

import logging

from ..exceptions import (
    CustomerNotFoundError,
    DeleteGuardError,
    DuplicateRecordError,
    ValidationError,
)
from ..utils.validators import clean_str, require_fields, valid_email
from . import common

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ("customer_name", "customer_city", "mobile_no", "email")


class CustomerService:
    """Admin customer management."""

    @staticmethod
    def list_customers():
        return sorted(common._store().customers.values(),
                      key=lambda c: common._lc(c.get("customer_name")))

    @staticmethod
    def get_customer(customer_id: str) -> dict:
        c = common._store().get_customer(customer_id)
        if c is None:
            raise CustomerNotFoundError()
        return c

    @staticmethod
    def create_customer(payload: dict) -> dict:
        require_fields(payload, CUSTOMER_FIELDS)
        data = {f: clean_str(payload.get(f)) for f in CUSTOMER_FIELDS}
        if not valid_email(data["email"]):
            raise ValidationError("Invalid email format.")
        store = common._store()
        try:
            cid = store.create_customer(data)
        except DuplicateRecordError:
            raise DuplicateRecordError("Customer with this mobile/email already exists.")
        logger.info("Customer %s created", data["email"])
        return store.get_customer(cid)

    @staticmethod
    def update_customer(customer_id: str, payload: dict) -> dict:
        """
        Update a customer. When the customer shares its id with a user account,
        the account's name and email follow.
        """
        data = {f: clean_str(payload.get(f)) for f in CUSTOMER_FIELDS if f in payload}
        if any(not v for v in data.values()):
            raise ValidationError("Customer fields cannot be empty")
        if data.get("email") and not valid_email(data["email"]):
            raise ValidationError("Invalid email format.")

        store = common._store()
        with store.locked():
            if store.get_customer(customer_id) is None:
                raise CustomerNotFoundError()
            user = store.get_user(customer_id)
            if user and data.get("email"):
                other = store.find_user(data["email"])
                if other and other["user_id"] != customer_id:
                    raise DuplicateRecordError("Email is already in use by another user.")
            try:
                updated = store.update_customer(customer_id, **data)
            except DuplicateRecordError:
                raise DuplicateRecordError("Customer update failed: duplicate contact info")
            if user:
                store.update_user(customer_id, name=data.get("customer_name"), email=data.get("email"))
        return updated

    @staticmethod
    def delete_customer(customer_id: str):
        store = common._store()
        with store.locked():
            if store.get_customer(customer_id) is None:
                raise CustomerNotFoundError()
            if common.has_current_bookings(store.bookings_for_customer(customer_id), common._today()):
                raise DeleteGuardError("Cannot delete: the customer has current or upcoming bookings")
            store.delete_customer(customer_id)
        logger.info("Customer %s deleted", customer_id)
