"""Signed staff session tokens (HS256, JWT compact form)."""

import base64
import hashlib
import hmac
import json
import time
from typing import Any

from fastapi import HTTPException, status

from app.config import settings


class SessionTokenError(Exception):
    pass


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _b64url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _sign(signing_input: bytes, secret: str) -> str:
    return _b64url_encode(hmac.new(secret.encode(), signing_input, hashlib.sha256).digest())


def issue_session_token(
    username: str,
    secret: str | None = None,
    ttl_s: int | None = None,
    now: float | None = None,
) -> str:
    issued_at = int(now if now is not None else time.time())
    claims = {
        "sub": username,
        "iat": issued_at,
        "exp": issued_at + (ttl_s if ttl_s is not None else settings.session_ttl_s),
    }
    header = _b64url_encode(json.dumps({"alg": "HS256", "typ": "JWT"}).encode())
    body = _b64url_encode(json.dumps(claims, separators=(",", ":")).encode())
    signing_input = f"{header}.{body}".encode()
    return f"{header}.{body}.{_sign(signing_input, secret or settings.session_secret)}"


def decode_session_token(
    token: str,
    secret: str | None = None,
    now: float | None = None,
) -> dict[str, Any]:
    try:
        header, body, signature = token.split(".")
    except ValueError as exc:
        raise SessionTokenError("Malformed session token") from exc

    expected = _sign(f"{header}.{body}".encode(), secret or settings.session_secret)
    if not hmac.compare_digest(expected, signature):
        raise SessionTokenError("Invalid session token signature")

    try:
        claims = json.loads(_b64url_decode(body))
    except ValueError as exc:
        raise SessionTokenError("Malformed session token") from exc

    exp = claims.get("exp") if isinstance(claims, dict) else None
    current = int(now if now is not None else time.time())
    if not isinstance(exp, int) or exp < current:
        raise SessionTokenError("Session expired")
    return claims


def unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )
