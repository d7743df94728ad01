"""
Response content negotiation (JSON or XML) driven by the Accept header.

Handlers declare `fmt: str = Depends(negotiation.get_response_format)` so an
unsupported Accept value is rejected with 406 before any work is done, then
build their response with `negotiation.render(...)`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from fastapi import Header, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .schemas import XML_INVALID_CHARS

JSON = "json"
XML = "xml"

_MEDIA_TYPES: dict[str, str] = {
    "*/*": JSON,
    "application/*": JSON,
    "application/json": JSON,
    "text/json": JSON,
    "application/xml": XML,
    "text/xml": XML,
}


def _parse_accept(accept: str) -> list[str]:
    """
    Return media ranges ordered by quality (highest first), dropping q=0.
    """
    ranked: list[tuple[float, int, str]] = []
    for index, part in enumerate(accept.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media_range = pieces[0].lower()
        if not media_range:
            continue
        quality = 1.0
        for param in pieces[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue
        ranked.append((-quality, index, media_range))
    return [media_range for (_, _, media_range) in sorted(ranked)]


def select_format(accept: str | None) -> str:
    raw = (accept or "").strip()
    if not raw:
        return JSON
    for media_range in _parse_accept(raw):
        fmt = _MEDIA_TYPES.get(media_range)
        if fmt is not None:
            return fmt
    raise HTTPException(
        status_code=status.HTTP_406_NOT_ACCEPTABLE,
        detail=f"None of the requested formats are supported: {raw}",
    )


async def get_response_format(accept: str | None = Header(default=None)) -> str:
    return select_format(accept)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return XML_INVALID_CHARS.sub("", str(value))


def _fields(model: BaseModel) -> list[tuple[str, Any]]:
    cls = type(model)
    pairs = [(field.alias or name, getattr(model, name)) for name, field in cls.model_fields.items()]
    for name, field in cls.model_computed_fields.items():
        pairs.append((field.alias or name, getattr(model, name)))
    return pairs


def _model_element(tag: str, model: BaseModel) -> ET.Element:
    element = ET.Element(tag)
    for key, value in _fields(model):
        _append_value(element, key, value)
    return element


def _append_value(parent: ET.Element, tag: str, value: Any) -> None:
    if isinstance(value, BaseModel):
        parent.append(_model_element(tag, value))
        return

    child = ET.SubElement(parent, tag)
    if value is None:
        child.set("nil", "true")
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, BaseModel):
                child.append(_model_element(type(item).__name__, item))
            else:
                ET.SubElement(child, "item").text = _scalar(item)
    else:
        child.text = _scalar(value)


def to_xml(content: BaseModel | list[BaseModel], *, model: type[BaseModel]) -> bytes:
    if isinstance(content, list):
        root = ET.Element(f"ArrayOf{model.__name__}")
        for item in content:
            root.append(_model_element(model.__name__, item))
    else:
        root = _model_element(model.__name__, content)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def render(
    content: BaseModel | list[BaseModel],
    fmt: str,
    *,
    model: type[BaseModel],
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> Response:
    if fmt == XML:
        return Response(
            content=to_xml(content, model=model),
            status_code=status_code,
            headers=headers,
            media_type="application/xml",
        )
    return JSONResponse(
        content=jsonable_encoder(content, by_alias=True),
        status_code=status_code,
        headers=headers,
    )
