"""
Point-of-interest API endpoints.

All routes require a token whose `city` claim is "Antwerp".
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Request, status
from fastapi.responses import Response

from cityinfo.auth import dependencies as auth_dependencies
from cityinfo.cities.dependencies import get_repository
from cityinfo.cities.repository import CityInfoRepository
from cityinfo.core import db, negotiation
from cityinfo.mail.service import MailService, get_mail_service

from . import service
from .schemas import (
    PatchOperation,
    PointOfInterestDto,
    PointOfInterestForCreationDto,
    PointOfInterestForUpdateDto,
)

router = APIRouter(
    prefix="/api/cities/{city_id}/pointsofinterest",
    dependencies=[Depends(auth_dependencies.must_be_from_antwerp)],
)


@router.get("")
async def get_points_of_interest(
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    fmt: str = Depends(negotiation.get_response_format),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    points = await service.get_points_of_interest(repository, city_id)
    return negotiation.render(points, fmt, model=PointOfInterestDto)


@router.get("/{point_of_interest_id}", name="get_point_of_interest")
async def get_point_of_interest(
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    point_of_interest_id: int = Path(..., ge=1, le=db.INT4_MAX),
    fmt: str = Depends(negotiation.get_response_format),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    point = await service.get_point_of_interest(repository, city_id, point_of_interest_id)
    return negotiation.render(point, fmt, model=PointOfInterestDto)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_point_of_interest(
    payload: PointOfInterestForCreationDto,
    request: Request,
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    fmt: str = Depends(negotiation.get_response_format),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    created = await service.create_point_of_interest(repository, city_id, payload)
    location = request.url_for(
        "get_point_of_interest",
        city_id=str(city_id),
        point_of_interest_id=str(created.id),
    )
    return negotiation.render(
        created,
        fmt,
        model=PointOfInterestDto,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": str(location)},
    )


@router.put("/{point_of_interest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_point_of_interest(
    payload: PointOfInterestForUpdateDto,
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    point_of_interest_id: int = Path(..., ge=1, le=db.INT4_MAX),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    await service.update_point_of_interest(repository, city_id, point_of_interest_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{point_of_interest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def partially_update_point_of_interest(
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    point_of_interest_id: int = Path(..., ge=1, le=db.INT4_MAX),
    patch_document: list[PatchOperation] = Body(...),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    await service.partially_update_point_of_interest(repository, city_id, point_of_interest_id, patch_document)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{point_of_interest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_point_of_interest(
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    point_of_interest_id: int = Path(..., ge=1, le=db.INT4_MAX),
    repository: CityInfoRepository = Depends(get_repository),
    mail_service: MailService = Depends(get_mail_service),
) -> Response:
    await service.delete_point_of_interest(repository, mail_service, city_id, point_of_interest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
