"""
Point-of-interest conversions, one function per direction.
"""

from __future__ import annotations

from cityinfo.cities.entities import PointOfInterest

from .schemas import PointOfInterestDto, PointOfInterestForCreationDto, PointOfInterestForUpdateDto


def to_point_of_interest_dto(point: PointOfInterest) -> PointOfInterestDto:
    return PointOfInterestDto(id=point.id, name=point.name, description=point.description)


def from_creation_dto(dto: PointOfInterestForCreationDto) -> PointOfInterest:
    return PointOfInterest(name=dto.name, description=dto.description)


def apply_update_dto(dto: PointOfInterestForUpdateDto, point: PointOfInterest) -> None:
    """
    Copy an update DTO onto a tracked entity in place.
    """
    point.name = dto.name
    point.description = dto.description


def to_update_dto(point: PointOfInterest) -> PointOfInterestForUpdateDto:
    # Not validated: the patched copy is validated before it is written back.
    return PointOfInterestForUpdateDto.model_construct(name=point.name, description=point.description)
