"""
Auth security helpers: password hashing and signed bearer tokens.
"""

from __future__ import annotations

import base64
import binascii
import time
from typing import Any

import bcrypt
import jwt

from cityinfo.core.settings import get_settings

JWT_ALGORITHM = "HS256"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def signing_key() -> bytes:
    """
    Symmetric HMAC key, configured as base64 text (AUTH_SECRET_FOR_KEY).
    """
    raw = get_settings().auth_secret_for_key
    try:
        key = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AuthSecurityError("AUTH_SECRET_FOR_KEY is not valid base64.") from exc
    if not key:
        raise AuthSecurityError("AUTH_SECRET_FOR_KEY is empty.")
    return key


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(
    *,
    user_id: int,
    first_name: str,
    last_name: str,
    city: str,
    issued_at: int | None = None,
) -> str:
    settings = get_settings()
    issued_at = now_epoch_s() if issued_at is None else issued_at
    expires_at = issued_at + (settings.auth_token_lifetime_min * 60)

    payload = {
        "sub": str(user_id),
        "given_name": first_name,
        "family_name": last_name,
        "city": city,
        "iss": settings.auth_issuer,
        "aud": settings.auth_audience,
        "nbf": issued_at,
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, signing_key(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature, lifetime, issuer and audience; return the claims.
    """
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    settings = get_settings()
    try:
        return jwt.decode(
            raw,
            signing_key(),
            algorithms=[JWT_ALGORITHM],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options={"require": ["sub", "exp", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token is expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc
