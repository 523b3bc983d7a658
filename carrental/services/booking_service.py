"""Booking service: creation for admins and users, updates, filters and deletion."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import date
from typing import Optional

from ..exceptions import (
    BookingNotFoundError,
    CarNotFoundError,
    CarUnavailableError,
    CustomerNotFoundError,
    InvalidDateRangeError,
    PermissionDeniedError,
    ValidationError,
)
from ..models.car import Car
from ..models.user import UserBase
from ..utils.constants import BOOKING_UID_LENGTH
from ..utils.dates import inclusive_days, overlap
from ..utils.validators import clean_str, parse_date, to_float
from . import common

logger = logging.getLogger(__name__)

UID_ALPHABET = string.ascii_lowercase + string.digits


def new_booking_uid() -> str:
    return "".join(secrets.choice(UID_ALPHABET) for _ in range(BOOKING_UID_LENGTH))


def _date_range(start_raw, end_raw) -> tuple[date, date]:
    if not clean_str(start_raw) or not clean_str(end_raw):
        raise InvalidDateRangeError("start_date and end_date are required")
    start = parse_date(start_raw, "start_date")
    end = parse_date(end_raw, "end_date")
    if start > end:
        raise InvalidDateRangeError(
            "Invalid date range. Start date must be before or equal to end date.")
    return start, end


def find_conflict(car_id: str, start: date, end: date,
                  exclude_booking_id: Optional[str] = None) -> Optional[dict]:
    """Return the first booking of `car_id` whose days intersect [start, end]."""
    for b in common._store().bookings_for_car(car_id):
        if b.get("booking_id") == exclude_booking_id:
            continue
        try:
            s = parse_date(b.get("start_date"))
            e = parse_date(b.get("end_date"))
        except InvalidDateRangeError:
            # Skip malformed records to avoid false positives
            continue
        if overlap(start, end, s, e):
            return b
    return None


def _ensure_available(car_id, start, end, exclude_booking_id=None):
    clash = find_conflict(car_id, start, end, exclude_booking_id)
    if clash:
        logger.info("Rejected booking for car %s %s..%s: overlaps booking %s",
                    car_id, start, end, clash.get("booking_uid"))
        raise CarUnavailableError(
            f"Car is already booked during the period {start.isoformat()} to {end.isoformat()}. "
            "Please select a different car or date range.")


def _resolve_customer(payload: dict, actor: UserBase) -> dict:
    """
    Admins pick the customer by id, email or exact name (in that order).
    Everyone else always books for their own customer profile.
    """
    store = common._store()
    if not actor.is_admin:
        customer = store.get_customer(actor.user_id)
        if not customer:
            raise CustomerNotFoundError("Customer profile not found for this account.")
        return customer

    customer = None
    if clean_str(payload.get("customer_id")):
        customer = store.get_customer(clean_str(payload["customer_id"]))
    elif clean_str(payload.get("email")):
        customer = store.find_customer(email=clean_str(payload["email"]))
    elif clean_str(payload.get("customer_name")):
        customer = store.find_customer(name=clean_str(payload["customer_name"]))
    if not customer:
        raise CustomerNotFoundError(
            "Customer profile not found. Please ensure the customer name/email is correct.")
    return customer


def _car_fields(car: dict) -> dict:
    return {"car_id": car["car_id"], "brand": car.get("brand", ""), "model": car.get("model", "")}


def _customer_fields(c: dict) -> dict:
    return {
        "customer_id": c["customer_id"],
        "customer_name": c.get("customer_name", ""),
        "mobile_no": c.get("mobile_no", ""),
        "customer_city": c.get("customer_city", ""),
        "email": c.get("email", ""),
    }


class BookingService:
    """
    Create, update, filter and delete bookings.
    Pricing is delegated to the caller's user model (AdminUser / CustomerUser).
    """

    @staticmethod
    def create_booking(payload: dict, actor: UserBase) -> dict:
        """
        Common creation path for admins and users:
        dates -> car -> overlap check -> customer -> pricing -> persist.
        """
        start, end = _date_range(payload.get("start_date"), payload.get("end_date"))
        if not actor.is_admin and start < common._today():
            raise InvalidDateRangeError("Start date cannot be in the past")

        store = common._store()
        with store.locked():
            car_id = clean_str(payload.get("car_id"))
            car = store.get_car(car_id) if car_id else None
            if not car:
                raise CarNotFoundError("Invalid car ID provided.")
            _ensure_available(car_id, start, end)
            customer = _resolve_customer(payload, actor)

            days = inclusive_days(start, end)
            discount, total = actor.price_booking(
                Car.from_dict(car), days,
                discount=payload.get("discount"),
                total=payload.get("total_bill_amount"),
            )

            doc = {
                **_car_fields(car),
                **_customer_fields(customer),
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "days": days,
                "discount": discount,
                "total_bill_amount": total,
                "booking_uid": new_booking_uid(),
                "created_by": actor.user_id,
            }
            bid = store.create_booking(doc)

        logger.info("Booking %s created for car %s (%s..%s) by %s",
                    doc["booking_uid"], car_id, doc["start_date"], doc["end_date"], actor.email)
        return store.get_booking(bid)

    @staticmethod
    def update_booking(booking_id: str, payload: dict) -> dict:
        """
        Admin edit of dates, car, discount and total. The overlap check ignores
        the booking being edited; car display fields follow a car change.
        """
        store = common._store()
        with store.locked():
            current = store.get_booking(booking_id)
            if not current:
                raise BookingNotFoundError()

            start, end = _date_range(payload.get("start_date") or current["start_date"],
                                     payload.get("end_date") or current["end_date"])
            car_id = clean_str(payload.get("car_id")) or current["car_id"]
            car = store.get_car(car_id)
            if not car:
                raise CarNotFoundError("Invalid car ID provided.")
            _ensure_available(car_id, start, end, exclude_booking_id=booking_id)

            updates = {
                **_car_fields(car),
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "days": inclusive_days(start, end),
            }
            if payload.get("discount") not in (None, ""):
                updates["discount"] = to_float(payload["discount"], "discount")
                if updates["discount"] < 0:
                    raise ValidationError("discount cannot be negative")
            if payload.get("total_bill_amount") not in (None, ""):
                total = to_float(payload["total_bill_amount"], "total_bill_amount")
                if total <= 0:
                    raise ValidationError("Total bill amount must be greater than 0.")
                updates["total_bill_amount"] = round(total, 2)
            updated = store.update_booking(booking_id, updates)

        logger.info("Booking %s updated", updated.get("booking_uid"))
        return updated

    @staticmethod
    def list_bookings():
        return common.sort_by_start_desc(common._store().bookings.values())

    @staticmethod
    def get_booking(booking_id: str, actor: UserBase) -> dict:
        b = common._store().get_booking(booking_id)
        if not b:
            raise BookingNotFoundError()
        if not actor.is_admin and b.get("customer_id") != actor.user_id:
            raise PermissionDeniedError("Not allowed to view this booking")
        return b

    @staticmethod
    def bookings_for_customer(customer_id: str, actor: UserBase):
        if not actor.is_admin and customer_id != actor.user_id:
            raise PermissionDeniedError("Not allowed to view bookings of another customer")
        return common.sort_by_start_desc(common._store().bookings_for_customer(customer_id))

    @staticmethod
    def filter_bookings(criteria: dict, actor: UserBase):
        """
        Filter by mobile/name substring, car and a date window.
        A booking is in the window when it ends on/after `from_date` and
        starts on/before `to_date`. Non-admins only ever see their own bookings.
        """
        mobile = common._lc(clean_str(criteria.get("mobile_no")))
        name = common._lc(clean_str(criteria.get("customer_name")))
        car_id = clean_str(criteria.get("car_id"))
        if car_id == "0":
            car_id = ""
        from_raw = clean_str(criteria.get("from_date"))
        to_raw = clean_str(criteria.get("to_date"))
        from_date = parse_date(from_raw, "from_date").isoformat() if from_raw else None
        to_date = parse_date(to_raw, "to_date").isoformat() if to_raw else None

        res = list(common._store().bookings.values())
        if not actor.is_admin:
            res = [b for b in res if b.get("customer_id") == actor.user_id]
        if mobile:
            res = [b for b in res if mobile in common._lc(b.get("mobile_no"))]
        if name:
            res = [b for b in res if name in common._lc(b.get("customer_name"))]
        if car_id:
            res = [b for b in res if b.get("car_id") == car_id]
        if from_date:
            res = [b for b in res if (b.get("end_date") or "") >= from_date]
        if to_date:
            res = [b for b in res if (b.get("start_date") or "") <= to_date]
        return common.sort_by_start_desc(res)

    @staticmethod
    def delete_booking(booking_id: str, actor: UserBase):
        """
        Admins delete any booking. A customer may cancel their own booking
        only before it starts.
        """
        store = common._store()
        with store.locked():
            b = store.get_booking(booking_id)
            if not b:
                raise BookingNotFoundError()
            if not actor.is_admin:
                if b.get("customer_id") != actor.user_id:
                    raise PermissionDeniedError("Not allowed to cancel this booking")
                if not (common._today() < parse_date(b["start_date"])):
                    raise PermissionDeniedError("Booking has already started and can no longer be cancelled")
            store.delete_booking(booking_id)
        logger.info("Booking %s deleted by %s", b.get("booking_uid"), actor.email)
