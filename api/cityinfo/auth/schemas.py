"""
Auth API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AuthenticationRequestBody(BaseModel):
    username: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1, max_length=128)
