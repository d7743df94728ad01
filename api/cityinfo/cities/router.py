"""
City API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from cityinfo.auth import dependencies as auth_dependencies
from cityinfo.core import db, negotiation

from . import service
from .dependencies import get_repository
from .repository import CityInfoRepository
from .schemas import CityWithoutPointsOfInterestDto

router = APIRouter(
    prefix="/api/cities",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.get("")
async def get_cities(
    name: str | None = Query(default=None),
    search_query: str | None = Query(default=None, alias="searchQuery"),
    page_number: int = Query(default=1, alias="pageNumber", ge=1, le=db.INT4_MAX),
    page_size: int = Query(default=10, alias="pageSize", ge=1),
    fmt: str = Depends(negotiation.get_response_format),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    """
    Paged city listing. Page size is capped at 20; paging details go out in
    the `X-Pagination` header.
    """
    cities, metadata = await service.list_cities(
        repository,
        name=name,
        search_query=search_query,
        page_number=page_number,
        page_size=page_size,
    )
    return negotiation.render(
        cities,
        fmt,
        model=CityWithoutPointsOfInterestDto,
        headers={"X-Pagination": metadata.to_header()},
    )


@router.get("/{city_id}")
async def get_city(
    city_id: int = Path(..., ge=1, le=db.INT4_MAX),
    include_points_of_interest: bool = Query(default=False, alias="includePointsOfInterest"),
    fmt: str = Depends(negotiation.get_response_format),
    repository: CityInfoRepository = Depends(get_repository),
) -> Response:
    city = await service.get_city(
        repository,
        city_id,
        include_points_of_interest=include_points_of_interest,
    )
    return negotiation.render(city, fmt, model=type(city))
