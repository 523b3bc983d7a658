from flask import Blueprint, request

from ..services.car_service import CarService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.responses import envelope, json_body

bp = Blueprint("cars", __name__, url_prefix="/api/cars")


@bp.get("")
@login_required
def list_cars():
    """Fleet list; optional ?brand=&min_rate=&max_rate= filters."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    cars = CarService.filter_cars(
        brand=q.get("brand"),
        min_rate=q.get("min_rate"),
        max_rate=q.get("max_rate"),
    )
    return envelope(cars)


@bp.get("/<car_id>")
@login_required
def get_car(car_id):
    return envelope(CarService.get_car(car_id))


@bp.get("/<car_id>/availability")
@login_required
def availability(car_id):
    ranges = CarService.availability_calendar(car_id)
    return envelope([{"start_date": s, "end_date": e} for s, e in ranges])


@bp.post("")
@login_required
@role_required(Role.ADMIN)
def create_car():
    car = CarService.create_car(json_body())
    return envelope(car, "Vehicle created successfully", status=201)


@bp.put("/<car_id>")
@login_required
@role_required(Role.ADMIN)
def update_car(car_id):
    car = CarService.update_car(car_id, json_body())
    return envelope(car, "Vehicle updated successfully")


@bp.delete("/<car_id>")
@login_required
@role_required(Role.ADMIN)
def delete_car(car_id):
    CarService.delete_car(car_id)
    return envelope(None, "Vehicle deleted successfully")
