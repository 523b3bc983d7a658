from flask import Blueprint

from ..models.user import as_customer
from ..services.booking_service import BookingService
from ..utils.constants import Role
from ..utils.decorators import current_actor, login_required, role_required
from ..utils.responses import envelope, json_body

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bp.get("")
@login_required
@role_required(Role.ADMIN)
def list_bookings():
    return envelope(BookingService.list_bookings())


@bp.post("")
@login_required
@role_required(Role.ADMIN)
def create_booking():
    """Admin booking: any customer, discount and total taken from the payload."""
    b = BookingService.create_booking(json_body(), current_actor())
    return envelope(b, "Booking created successfully", status=201)


@bp.post("/user")
@login_required
def create_user_booking():
    """Self-service booking: no discount, bill computed from the daily rate."""
    # Admins using the self-service path get self-service pricing too
    actor = as_customer(current_actor())
    b = BookingService.create_booking(json_body(), actor)
    return envelope(b, "Booking created successfully", status=201)


@bp.post("/filter")
@login_required
def filter_bookings():
    res = BookingService.filter_bookings(json_body(), current_actor())
    return envelope(res)


@bp.get("/customer/<customer_id>")
@login_required
def bookings_for_customer(customer_id):
    return envelope(BookingService.bookings_for_customer(customer_id, current_actor()))


@bp.get("/<booking_id>")
@login_required
def get_booking(booking_id):
    return envelope(BookingService.get_booking(booking_id, current_actor()))


@bp.put("/<booking_id>")
@login_required
@role_required(Role.ADMIN)
def update_booking(booking_id):
    b = BookingService.update_booking(booking_id, json_body())
    return envelope(b, "Booking updated successfully")


@bp.delete("/<booking_id>")
@login_required
def delete_booking(booking_id):
    BookingService.delete_booking(booking_id, current_actor())
    return envelope(None, "Booking deleted successfully")
