"""
Patch documents for point-of-interest updates.

The current entity is projected into `PointOfInterestForUpdateDto`, each
operation is applied to a plain dict copy, and the result is validated with
the same rules as a full update. Nothing is written back unless every
operation applied cleanly and the result validates.

Supported operations:
- add / replace: set the field to `value`
- remove: reset the field to its default ("" for name, null for description)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from cityinfo.core.errors import ErrorDetail, PatchValidationError, errors_from_pydantic

from .schemas import PatchOperation, PointOfInterestForUpdateDto

_FIELD_DEFAULTS: dict[str, Any] = {
    "name": "",
    "description": None,
}


def _field_for_path(path: str) -> str | None:
    """
    Map "/name" or "/Description" to the DTO field name.
    """
    segment = (path or "").strip()
    if not segment.startswith("/"):
        return None
    segment = segment[1:]
    if not segment or "/" in segment:
        return None

    for name, field in PointOfInterestForUpdateDto.model_fields.items():
        alias = field.alias or name
        if segment.lower() in (name.lower(), alias.lower()):
            return name
    return None


def _set(document: dict[str, Any], field: str, operation: PatchOperation) -> None:
    document[field] = operation.value


def _remove(document: dict[str, Any], field: str, operation: PatchOperation) -> None:
    document[field] = _FIELD_DEFAULTS[field]


_OPERATIONS: dict[str, Callable[[dict[str, Any], str, PatchOperation], None]] = {
    "add": _set,
    "replace": _set,
    "remove": _remove,
}


def apply_operations(document: dict[str, Any], operations: list[PatchOperation]) -> dict[str, Any]:
    """
    Apply `operations` to a copy of `document`; unknown ops or paths are collected and raised together.
    """
    patched = dict(document)
    errors: list[ErrorDetail] = []

    for operation in operations:
        handler = _OPERATIONS.get(operation.op.strip().lower())
        if handler is None:
            errors.append(ErrorDetail(field=operation.path, message=f"The op '{operation.op}' is not supported."))
            continue

        field = _field_for_path(operation.path)
        if field is None:
            errors.append(
                ErrorDetail(
                    field=operation.path,
                    message=f"The target location specified by path '{operation.path}' was not found.",
                )
            )
            continue

        handler(patched, field, operation)

    if errors:
        raise PatchValidationError(errors)
    return patched


def apply_patch(
    target: PointOfInterestForUpdateDto,
    operations: list[PatchOperation],
) -> PointOfInterestForUpdateDto:
    patched = apply_operations(target.model_dump(), operations)
    try:
        return PointOfInterestForUpdateDto.model_validate(patched)
    except ValidationError as exc:
        raise PatchValidationError(errors_from_pydantic(exc)) from exc
