from flask import Blueprint

from ..services.dashboard_service import DashboardService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.responses import envelope

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@bp.get("")
@login_required
@role_required(Role.ADMIN)
def summary():
    return envelope(DashboardService.summary())


@bp.get("/analytics")
@login_required
@role_required(Role.ADMIN)
def analytics():
    return envelope(DashboardService.analytics())
