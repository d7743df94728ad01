"""
City business logic: page-size clamping, 404s and DTO projection.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from . import mapping
from .repository import CityInfoRepository
from .schemas import CityDto, CityWithoutPointsOfInterestDto, PaginationMetadata

MAX_CITIES_PAGE_SIZE = 20


def effective_page_size(requested: int) -> int:
    return min(requested, MAX_CITIES_PAGE_SIZE)


async def list_cities(
    repository: CityInfoRepository,
    *,
    name: str | None,
    search_query: str | None,
    page_number: int,
    page_size: int,
) -> tuple[list[CityWithoutPointsOfInterestDto], PaginationMetadata]:
    cities, metadata = await repository.get_cities_page(
        name,
        search_query,
        page_number,
        effective_page_size(page_size),
    )
    return [mapping.to_city_without_points_of_interest_dto(c) for c in cities], metadata


async def get_city(
    repository: CityInfoRepository,
    city_id: int,
    *,
    include_points_of_interest: bool,
) -> CityDto | CityWithoutPointsOfInterestDto:
    city = await repository.get_city(city_id, include_points_of_interest)
    if city is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City not found.")

    if include_points_of_interest:
        return mapping.to_city_dto(city)
    return mapping.to_city_without_points_of_interest_dto(city)
