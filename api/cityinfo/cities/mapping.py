"""
Entity -> DTO conversions for cities.
"""

from __future__ import annotations

from cityinfo.points_of_interest.mapping import to_point_of_interest_dto

from .entities import City
from .schemas import CityDto, CityWithoutPointsOfInterestDto


def to_city_without_points_of_interest_dto(city: City) -> CityWithoutPointsOfInterestDto:
    return CityWithoutPointsOfInterestDto(
        id=city.id,
        name=city.name,
        description=city.description,
    )


def to_city_dto(city: City) -> CityDto:
    return CityDto(
        id=city.id,
        name=city.name,
        description=city.description,
        points_of_interest=[to_point_of_interest_dto(p) for p in city.points_of_interest],
    )
