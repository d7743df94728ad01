"""
Auth business logic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status

from . import repository, schemas, security

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CityInfoUser:
    user_id: int
    username: str
    first_name: str
    last_name: str
    city: str


def _to_city_info_user(user_row: dict) -> CityInfoUser:
    return CityInfoUser(
        user_id=int(user_row["id"]),
        username=str(user_row["username"]),
        first_name=str(user_row["first_name"]),
        last_name=str(user_row["last_name"]),
        city=str(user_row["city"]),
    )


async def validate_user_credentials(username: str, password: str) -> CityInfoUser | None:
    user_row = await repository.get_user_by_username(username)
    if user_row is None:
        return None
    if not security.verify_password(password, str(user_row.get("password_hash") or "")):
        return None
    return _to_city_info_user(user_row)


async def authenticate(payload: schemas.AuthenticationRequestBody) -> str:
    """
    Return a signed bearer token for valid credentials, 401 otherwise.
    """
    user = await validate_user_credentials(payload.username, payload.password)
    if user is None:
        logger.info("Authentication failed for username %r.", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )

    return security.build_access_token(
        user_id=user.user_id,
        first_name=user.first_name,
        last_name=user.last_name,
        city=user.city,
    )


def get_user_from_access_token(access_token: str) -> dict:
    try:
        return security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
