"""
City / point-of-interest persistence (raw SQL over one pooled connection).

A `CityInfoRepository` lives for a single request. Reads go straight to the
connection. Point-of-interest inserts, deletes, and edits made to points the
repository has loaded are held back until `save_changes()`, which writes them
all in one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import asyncpg

from .entities import City, PointOfInterest
from .schemas import PaginationMetadata

logger = logging.getLogger(__name__)


def build_city_filter(name: str | None, search_query: str | None) -> tuple[str, list[Any]]:
    """
    Build the WHERE clause (and its args) for a city listing.

    - `name`: exact, case-sensitive match after trimming
    - `search_query`: substring of name, or of a non-null description
    Blank values mean "no filter".
    """
    clauses: list[str] = []
    args: list[Any] = []

    name = (name or "").strip()
    if name:
        args.append(name)
        clauses.append(f"name = ${len(args)}")

    search_query = (search_query or "").strip()
    if search_query:
        args.append(search_query)
        n = len(args)
        # strpos keeps % and _ in the term literal.
        clauses.append(
            f"(strpos(name, ${n}) > 0 OR (description IS NOT NULL AND strpos(description, ${n}) > 0))"
        )

    if not clauses:
        return "", args
    return "WHERE " + " AND ".join(clauses), args


def _city_from_row(row: Any) -> City:
    return City(id=int(row["id"]), name=str(row["name"]), description=row["description"])


def _point_from_row(row: Any) -> PointOfInterest:
    return PointOfInterest(
        id=int(row["id"]),
        city_id=int(row["city_id"]),
        name=str(row["name"]),
        description=row["description"],
    )


@dataclass
class _Tracked:
    point: PointOfInterest
    name: str
    description: str | None

    def is_modified(self) -> bool:
        return (self.point.name, self.point.description) != (self.name, self.description)


class CityInfoRepository:
    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn
        self._tracked: dict[int, _Tracked] = {}
        self._pending_inserts: list[PointOfInterest] = []
        self._pending_deletes: list[PointOfInterest] = []

    def _track(self, point: PointOfInterest) -> PointOfInterest:
        tracked = self._tracked.get(point.id)
        if tracked is not None:
            # Same row loaded twice: hand back the instance already being tracked.
            return tracked.point
        self._tracked[point.id] = _Tracked(point=point, name=point.name, description=point.description)
        return point

    async def get_cities_page(
        self,
        name: str | None,
        search_query: str | None,
        page_number: int,
        page_size: int,
    ) -> tuple[list[City], PaginationMetadata]:
        if page_number < 1:
            raise ValueError("page_number must be >= 1.")
        if page_size < 1:
            raise ValueError("page_size must be >= 1.")

        where, args = build_city_filter(name, search_query)

        row = await self._conn.fetchrow(f"SELECT count(*) AS n FROM cities {where}", *args)
        total_item_count = int(row["n"]) if row is not None else 0

        rows = await self._conn.fetch(
            f"""
            SELECT id, name, description
            FROM cities
            {where}
            ORDER BY name, id
            LIMIT ${len(args) + 1}
            OFFSET ${len(args) + 2}
            """,
            *args,
            page_size,
            page_size * (page_number - 1),
        )
        metadata = PaginationMetadata(
            total_item_count=total_item_count,
            page_size=page_size,
            current_page=page_number,
        )
        return [_city_from_row(r) for r in rows], metadata

    async def get_city(self, city_id: int, include_points_of_interest: bool = False) -> City | None:
        row = await self._conn.fetchrow(
            """
            SELECT id, name, description
            FROM cities
            WHERE id = $1
            """,
            city_id,
        )
        if row is None:
            return None

        city = _city_from_row(row)
        if include_points_of_interest:
            city.points_of_interest = await self.get_points_of_interest_for_city(city_id)
        return city

    async def city_exists(self, city_id: int) -> bool:
        row = await self._conn.fetchrow("SELECT 1 AS ok FROM cities WHERE id = $1 LIMIT 1", city_id)
        return row is not None

    async def get_points_of_interest_for_city(self, city_id: int) -> list[PointOfInterest]:
        rows = await self._conn.fetch(
            """
            SELECT id, city_id, name, description
            FROM points_of_interest
            WHERE city_id = $1
            ORDER BY id
            """,
            city_id,
        )
        return [self._track(_point_from_row(r)) for r in rows]

    async def get_point_of_interest_for_city(self, city_id: int, point_of_interest_id: int) -> PointOfInterest | None:
        row = await self._conn.fetchrow(
            """
            SELECT id, city_id, name, description
            FROM points_of_interest
            WHERE city_id = $1
              AND id = $2
            """,
            city_id,
            point_of_interest_id,
        )
        if row is None:
            return None
        return self._track(_point_from_row(row))

    async def add_point_of_interest_for_city(self, city_id: int, point_of_interest: PointOfInterest) -> None:
        """
        Queue a new point for `city_id`. Does nothing when the city is missing;
        callers check existence first.
        """
        city = await self.get_city(city_id, include_points_of_interest=False)
        if city is None:
            return None
        point_of_interest.city_id = city.id
        self._pending_inserts.append(point_of_interest)

    def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        pending = [p for p in self._pending_inserts if p is not point_of_interest]
        if len(pending) != len(self._pending_inserts):
            self._pending_inserts = pending
            return None
        self._tracked.pop(point_of_interest.id, None)
        self._pending_deletes.append(point_of_interest)

    async def save_changes(self) -> bool:
        """
        Write all pending changes in one transaction.

        Returns True unless the affected-row count comes back negative.
        """
        affected = 0
        modified = [t for t in self._tracked.values() if t.is_modified()]

        async with self._conn.transaction():
            for point in self._pending_deletes:
                status = await self._conn.execute(
                    "DELETE FROM points_of_interest WHERE id = $1 AND city_id = $2",
                    point.id,
                    point.city_id,
                )
                affected += _rowcount(status)

            for tracked in modified:
                status = await self._conn.execute(
                    """
                    UPDATE points_of_interest
                    SET name = $2,
                        description = $3
                    WHERE id = $1
                    """,
                    tracked.point.id,
                    tracked.point.name,
                    tracked.point.description,
                )
                affected += _rowcount(status)

            for point in self._pending_inserts:
                row = await self._conn.fetchrow(
                    """
                    INSERT INTO points_of_interest (city_id, name, description)
                    VALUES ($1, $2, $3)
                    RETURNING id
                    """,
                    point.city_id,
                    point.name,
                    point.description,
                )
                if row is None:
                    raise RuntimeError("Failed to insert point of interest.")
                point.id = int(row["id"])
                affected += 1

        inserted = self._pending_inserts
        self._pending_inserts = []
        self._pending_deletes = []
        for tracked in modified:
            tracked.name = tracked.point.name
            tracked.description = tracked.point.description
        for point in inserted:
            self._track(point)

        logger.debug("Saved changes: %d row(s) affected.", affected)
        return affected >= 0


def _rowcount(status: str) -> int:
    # asyncpg returns the command tag, e.g. "DELETE 1" / "UPDATE 0".
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, IndexError):
        return 0
