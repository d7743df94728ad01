"""
Point-of-interest DTOs (read, create, update) and patch operations.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from cityinfo.core.schemas import XML_INVALID_CHARS, CamelModel

NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200


class PointOfInterestDto(CamelModel):
    id: int
    name: str
    description: str | None = None


class _PointOfInterestWriteDto(CamelModel):
    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("You should provide a name value.")
        return value

    @field_validator("name", "description")
    @classmethod
    def _no_control_characters(cls, value: str | None) -> str | None:
        if value is not None and XML_INVALID_CHARS.search(value):
            raise ValueError("Control characters are not allowed.")
        return value


class PointOfInterestForCreationDto(_PointOfInterestWriteDto):
    pass


class PointOfInterestForUpdateDto(_PointOfInterestWriteDto):
    pass


class PatchOperation(BaseModel):
    """
    One entry of a JSON Patch document (`[{"op": ..., "path": ..., "value": ...}]`).
    """

    op: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    value: Any = None
