"""
Problem-details (RFC 7807) error responses.

- HTTPException          -> same status, `detail` passed through
- RequestValidationError -> 400 with field-level `errors`
- anything else          -> 500, internals only shown in development
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from starlette.exceptions import HTTPException

from .settings import get_settings

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

_STATUS_TITLES: dict[int, str] = {
    400: "One or more validation errors occurred.",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    413: "Payload Too Large",
    415: "Unsupported Media Type",
    500: "An error occurred while processing your request.",
}


class ErrorDetail(BaseModel):
    field: str
    message: str


class ProblemDetails(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
    errors: list[ErrorDetail] | None = Field(default=None)


class PatchValidationError(Exception):
    """
    Raised when a patch document cannot be applied or leaves the target invalid.
    """

    def __init__(self, errors: list[ErrorDetail]) -> None:
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    # Drop the request section ("body", "query", "path") from the location.
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


def errors_from_pydantic(exc: ValidationError | RequestValidationError) -> list[ErrorDetail]:
    return [ErrorDetail(field=_field_name(err.get("loc", ())), message=str(err.get("msg", ""))) for err in exc.errors()]


def problem_response(
    request: Request,
    status_code: int,
    *,
    detail: str | None = None,
    errors: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    problem = ProblemDetails(
        title=_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    return problem_response(request, exc.status_code, detail=detail, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return problem_response(request, status.HTTP_400_BAD_REQUEST, errors=errors_from_pydantic(exc))


async def patch_validation_exception_handler(request: Request, exc: PatchValidationError) -> JSONResponse:
    return problem_response(request, status.HTTP_400_BAD_REQUEST, errors=exc.errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = f"{type(exc).__name__}: {exc}" if get_settings().is_development else None
    return problem_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PatchValidationError, patch_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
