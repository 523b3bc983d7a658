from flask import Blueprint

from ..services.customer_service import CustomerService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.responses import envelope, json_body

bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@bp.get("")
@login_required
@role_required(Role.ADMIN)
def list_customers():
    return envelope(CustomerService.list_customers())


@bp.get("/<customer_id>")
@login_required
@role_required(Role.ADMIN)
def get_customer(customer_id):
    return envelope(CustomerService.get_customer(customer_id))


@bp.post("")
@login_required
@role_required(Role.ADMIN)
def create_customer():
    c = CustomerService.create_customer(json_body())
    return envelope(c, "Customer created successfully", status=201)


@bp.put("/<customer_id>")
@login_required
@role_required(Role.ADMIN)
def update_customer(customer_id):
    c = CustomerService.update_customer(customer_id, json_body())
    return envelope(c, "Customer updated successfully")


@bp.delete("/<customer_id>")
@login_required
@role_required(Role.ADMIN)
def delete_customer(customer_id):
    CustomerService.delete_customer(customer_id)
    return envelope(None, "Customer deleted successfully")
