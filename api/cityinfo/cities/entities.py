"""
City and point-of-interest records as loaded from Postgres.

A City owns its points of interest; a point's `city_id` never changes once
it has been stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PointOfInterest:
    name: str
    description: str | None = None
    id: int = 0
    city_id: int = 0


@dataclass
class City:
    name: str
    description: str | None = None
    id: int = 0
    points_of_interest: list[PointOfInterest] = field(default_factory=list)
