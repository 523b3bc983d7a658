from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import generate_password_hash, check_password_hash

from ..exceptions import AuthenticationError
from .constants import TOKEN_SALT


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    if not isinstance(password, str) or not isinstance(hashed, str):
        return False
    try:
        return check_password_hash(hashed, password)
    except (TypeError, ValueError):
        return False


def _serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)


def issue_token(secret_key: str, user: dict) -> str:
    """Sign the claims the client needs to act as `user`."""
    claims = {
        "user_id": user["user_id"],
        "email": user["email"],
        "name": user["name"],
        "role": user["role"],
    }
    return _serializer(secret_key).dumps(claims)


def decode_token(secret_key: str, token: str, max_age: int) -> tuple[dict, float]:
    """
    Return (claims, expires_at) of a valid token or raise AuthenticationError.
    `expires_at` is a POSIX timestamp: signing time plus `max_age`.
    """
    try:
        claims, signed_at = _serializer(secret_key).loads(
            token, max_age=max_age, return_timestamp=True)
    except SignatureExpired:
        raise AuthenticationError("Token has expired")
    except BadSignature:
        raise AuthenticationError("Token is not valid")
    return claims, signed_at.timestamp() + max_age
