"""
Auth dependencies for protected FastAPI routes.

`get_current_user` only requires a valid token. `require_claim(key, value)`
builds a guard that additionally requires one claim to hold an exact value.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, HTTPException, status

from . import service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise _unauthorized("Missing Authorization header.")

    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token.strip()


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> dict:
    return service.get_user_from_access_token(access_token)


def require_claim(claim_key: str, expected_value: str) -> Callable[..., Awaitable[dict]]:
    async def _require_claim(current_user: dict = Depends(get_current_user)) -> dict:
        if str(current_user.get(claim_key) or "") != expected_value:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Claim '{claim_key}' does not allow access to this resource.",
            )
        return current_user

    return _require_claim


must_be_from_antwerp = require_claim("city", "Antwerp")
