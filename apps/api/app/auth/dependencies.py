import hmac
from dataclasses import dataclass

from fastapi import Header

from app.auth.tokens import SessionTokenError, decode_session_token, unauthorized
from app.config import settings


@dataclass
class StaffContext:
    username: str
    expires_at: int


def verify_staff_credentials(username: str, password: str) -> bool:
    username_ok = hmac.compare_digest(username.encode(), settings.staff_username.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.staff_password.encode())
    return username_ok and password_ok


def require_staff(authorization: str | None = Header(default=None)) -> StaffContext:
    if not authorization or not authorization.startswith("Bearer "):
        raise unauthorized("Missing bearer token")

    token = authorization.removeprefix("Bearer ").strip()
    try:
        claims = decode_session_token(token)
    except SessionTokenError as err:
        raise unauthorized(str(err)) from err

    username = claims.get("sub")
    if not isinstance(username, str) or username != settings.staff_username:
        raise unauthorized("Invalid session claims")
    return StaffContext(username=username, expires_at=claims["exp"])
