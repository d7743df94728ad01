"""
Authentication API endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/api/authentication")


@router.post("/authenticate")
async def authenticate(request: schemas.AuthenticationRequestBody) -> str:
    """
    Exchange a username/password pair for a bearer token (valid one hour).
    """
    return await service.authenticate(request)
