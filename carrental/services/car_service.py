from __future__ import annotations

import logging
from typing import List, Tuple

from ..exceptions import CarNotFoundError, DeleteGuardError, DuplicateRecordError, ValidationError
from ..utils.constants import MIN_CAR_YEAR
from ..utils.validators import clean_str, require_fields, to_float, to_float_safe, to_int
from . import common

logger = logging.getLogger(__name__)

CAR_FIELDS = ("brand", "model", "year", "color", "daily_rate", "reg_no")
DUPLICATE_REG_NO = "Car registration number already exists"


def _car_values(payload: dict, partial: bool = False) -> dict:
    """Validate car fields; with `partial`, only the fields present are checked."""
    if not partial:
        require_fields(payload, CAR_FIELDS)
    out = {}
    for key in ("brand", "model", "color", "reg_no", "car_image"):
        if key in payload:
            out[key] = clean_str(payload.get(key))
            if key != "car_image" and not out[key]:
                raise ValidationError(f"{key} cannot be empty")
    if "year" in payload:
        out["year"] = to_int(payload.get("year"), "year")
        if out["year"] < MIN_CAR_YEAR:
            raise ValidationError(f"year must be {MIN_CAR_YEAR} or later")
    if "daily_rate" in payload:
        out["daily_rate"] = to_float(payload.get("daily_rate"), "daily_rate")
        if out["daily_rate"] < 0:
            raise ValidationError("daily_rate cannot be negative")
    return out


class CarService:
    """Fleet catalogue: filter, create, update, delete and booked ranges."""

    @staticmethod
    def filter_cars(brand=None, min_rate=None, max_rate=None):
        """
        Filter cars by brand/model keyword and daily rate range.
        Invalid bounds are ignored; swapped bounds are normalized.
        """
        res = list(common._store().cars.values())

        if brand:
            kw = common._lc(brand).strip()
            if kw:
                res = [c for c in res
                       if kw in common._lc(c.get("brand")) or kw in common._lc(c.get("model"))]

        min_val = to_float_safe(min_rate)
        max_val = to_float_safe(max_rate)
        if (min_val is not None) and (max_val is not None) and (min_val > max_val):
            min_val, max_val = max_val, min_val

        if (min_val is not None) or (max_val is not None):
            def within(c):
                r = to_float_safe(c.get("daily_rate"))
                if r is None:
                    return False
                if (min_val is not None) and (r < min_val):
                    return False
                if (max_val is not None) and (r > max_val):
                    return False
                return True

            res = [c for c in res if within(c)]

        res.sort(key=lambda c: (common._lc(c.get("brand")), common._lc(c.get("model"))))
        return res

    @staticmethod
    def get_car(car_id: str) -> dict:
        """Return a car dict by ID or raise CarNotFoundError."""
        car = common._store().get_car(car_id)
        if car is None:
            raise CarNotFoundError(f"Error: car with ID '{car_id}' not found")
        return car

    @staticmethod
    def create_car(payload: dict) -> dict:
        store = common._store()
        values = _car_values(payload)
        try:
            cid = store.create_car(values)
        except DuplicateRecordError:
            raise DuplicateRecordError(DUPLICATE_REG_NO)
        logger.info("Car %s (%s %s) created", values["reg_no"], values["brand"], values["model"])
        return store.get_car(cid)

    @staticmethod
    def update_car(car_id: str, payload: dict) -> dict:
        values = _car_values(payload, partial=True)
        try:
            updated = common._store().update_car(car_id, **values)
        except DuplicateRecordError:
            raise DuplicateRecordError(DUPLICATE_REG_NO)
        if updated is None:
            raise CarNotFoundError(f"Error: car with ID '{car_id}' not found")
        return updated

    @staticmethod
    def delete_car(car_id: str):
        """
        Delete a car if and only if it exists and no booking for it
        ends today or later.
        """
        store = common._store()
        with store.locked():
            if store.get_car(car_id) is None:
                raise CarNotFoundError(f"Error: car with ID '{car_id}' not found")
            if common.has_current_bookings(store.bookings_for_car(car_id), common._today()):
                raise DeleteGuardError("Cannot delete: the car has current or upcoming bookings")
            store.delete_car(car_id)
        logger.info("Car %s deleted", car_id)

    @staticmethod
    def availability_calendar(car_id: str) -> List[Tuple[str, str]]:
        """
        Return (start, end) strings of every booking for this car, sorted by start.
        Both ends are booked days. Used by clients to disable booked date ranges.
        """
        CarService.get_car(car_id)
        ranges = [(b["start_date"], b["end_date"]) for b in common._store().bookings_for_car(car_id)]
        ranges.sort(key=lambda t: t[0])  # stable for UI
        return ranges
