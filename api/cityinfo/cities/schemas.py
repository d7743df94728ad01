"""
City DTOs and pagination metadata.
"""

from __future__ import annotations

import json
import math

from pydantic import Field, computed_field

from cityinfo.core.schemas import CamelModel
from cityinfo.points_of_interest.schemas import PointOfInterestDto


class CityWithoutPointsOfInterestDto(CamelModel):
    id: int
    name: str
    description: str | None = None


class CityDto(CityWithoutPointsOfInterestDto):
    points_of_interest: list[PointOfInterestDto] = Field(default_factory=list)

    @computed_field(alias="numberOfPointsOfInterest")
    @property
    def number_of_points_of_interest(self) -> int:
        return len(self.points_of_interest)


class PaginationMetadata(CamelModel):
    total_item_count: int
    page_size: int
    current_page: int

    @computed_field(alias="totalPageCount")
    @property
    def total_page_count(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_item_count / self.page_size)

    def to_header(self) -> str:
        """
        Value for the `X-Pagination` response header.
        """
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))
