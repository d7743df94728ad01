"""
Point-of-interest business logic.

Every lookup goes through the parent city: a missing city is a 404 before
any point is fetched, and points are only ever resolved by (city id, point id).
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from cityinfo.cities.entities import PointOfInterest
from cityinfo.cities.repository import CityInfoRepository
from cityinfo.mail.service import MailService

from . import mapping, patch
from .schemas import (
    PatchOperation,
    PointOfInterestDto,
    PointOfInterestForCreationDto,
    PointOfInterestForUpdateDto,
)

logger = logging.getLogger(__name__)


async def _require_city(repository: CityInfoRepository, city_id: int) -> None:
    if not await repository.city_exists(city_id):
        logger.info("City with id %s wasn't found when accessing points of interest.", city_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City not found.")


async def _require_point_of_interest(
    repository: CityInfoRepository,
    city_id: int,
    point_of_interest_id: int,
) -> PointOfInterest:
    await _require_city(repository, city_id)
    point = await repository.get_point_of_interest_for_city(city_id, point_of_interest_id)
    if point is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Point of interest not found.")
    return point


async def get_points_of_interest(repository: CityInfoRepository, city_id: int) -> list[PointOfInterestDto]:
    await _require_city(repository, city_id)
    points = await repository.get_points_of_interest_for_city(city_id)
    return [mapping.to_point_of_interest_dto(p) for p in points]


async def get_point_of_interest(
    repository: CityInfoRepository,
    city_id: int,
    point_of_interest_id: int,
) -> PointOfInterestDto:
    point = await _require_point_of_interest(repository, city_id, point_of_interest_id)
    return mapping.to_point_of_interest_dto(point)


async def create_point_of_interest(
    repository: CityInfoRepository,
    city_id: int,
    payload: PointOfInterestForCreationDto,
) -> PointOfInterestDto:
    await _require_city(repository, city_id)

    point = mapping.from_creation_dto(payload)
    await repository.add_point_of_interest_for_city(city_id, point)
    await repository.save_changes()

    return mapping.to_point_of_interest_dto(point)


async def update_point_of_interest(
    repository: CityInfoRepository,
    city_id: int,
    point_of_interest_id: int,
    payload: PointOfInterestForUpdateDto,
) -> None:
    point = await _require_point_of_interest(repository, city_id, point_of_interest_id)
    mapping.apply_update_dto(payload, point)
    await repository.save_changes()


async def partially_update_point_of_interest(
    repository: CityInfoRepository,
    city_id: int,
    point_of_interest_id: int,
    operations: list[PatchOperation],
) -> None:
    point = await _require_point_of_interest(repository, city_id, point_of_interest_id)

    # Raises PatchValidationError (400) before the entity is touched.
    patched = patch.apply_patch(mapping.to_update_dto(point), operations)

    mapping.apply_update_dto(patched, point)
    await repository.save_changes()


async def delete_point_of_interest(
    repository: CityInfoRepository,
    mail_service: MailService,
    city_id: int,
    point_of_interest_id: int,
) -> None:
    point = await _require_point_of_interest(repository, city_id, point_of_interest_id)

    repository.delete_point_of_interest(point)
    await repository.save_changes()

    mail_service.send(
        "Point of interest deleted.",
        f"Point of interest {point.name} with ID {point.id} was deleted.",
    )
