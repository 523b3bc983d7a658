from flask import Blueprint, current_app, g

from ..services.auth_service import AuthService
from ..utils.decorators import login_required
from ..utils.responses import envelope, json_body

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
def register():
    user = AuthService.register(json_body())
    return envelope(user, "User registered successfully and customer profile created.", status=201)


@bp.post("/login")
def login():
    body = json_body()
    token, user = AuthService.login(body.get("email"), body.get("password"),
                                    current_app.config["SECRET_KEY"])
    payload = {"token": token, "user": user}
    return envelope(payload, "Login successful")


@bp.post("/logout")
@login_required
def logout():
    AuthService.logout(g.token, g.token_expires_at)
    return envelope(None, "Logout successful")


@bp.get("/profile")
@login_required
def profile():
    return envelope(AuthService.profile(g.user["user_id"]))


@bp.put("/profile")
@login_required
def update_profile():
    user = AuthService.update_profile(g.user["user_id"], json_body())
    return envelope(user, "Profile updated successfully.")
