from functools import wraps

from flask import current_app, g, request

from ..exceptions import AuthenticationError, PermissionDeniedError
from ..models.store import Store
from ..models.user import user_from_claims
from .security import decode_token


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError("No token, authorization denied")
    return header.split(" ", 1)[1].strip()


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if Store.instance().is_token_revoked(token):
            raise AuthenticationError("Token has been revoked")
        g.user, g.token_expires_at = decode_token(
            current_app.config["SECRET_KEY"],
            token,
            max_age=current_app.config["TOKEN_MAX_AGE"],
        )
        g.token = token
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = (g.get("user") or {}).get("role")
            if role not in roles:
                raise PermissionDeniedError(f"Access denied: {'/'.join(roles)} role required.")
            return fn(*args, **kwargs)

        return wrapper

    return deco


def current_actor():
    """Rich user object for the token of the current request."""
    return user_from_claims(g.get("user"))
