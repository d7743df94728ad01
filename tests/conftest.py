"""
Shared test fixtures.

Unit tests run the real FastAPI app against an in-memory repository
(dependency override), so no database is needed. Integration tests live in
`tests/integration` and need TEST_DATABASE_URL.
"""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import MagicMock

import bcrypt
import pytest
from fastapi.testclient import TestClient

from cityinfo.auth import security
from cityinfo.cities.dependencies import get_repository
from cityinfo.cities.entities import City, PointOfInterest
from cityinfo.cities.schemas import PaginationMetadata
from cityinfo.core.settings import get_settings
from cityinfo.mail.service import MailService, get_mail_service
from cityinfo.main import app

_SETTINGS_ENV = (
    "DATABASE_URL",
    "DB_POOL_MIN_SIZE",
    "DB_POOL_MAX_SIZE",
    "AUTH_ISSUER",
    "AUTH_AUDIENCE",
    "AUTH_SECRET_FOR_KEY",
    "AUTH_TOKEN_LIFETIME_MIN",
    "MAIL_SERVICE",
    "MAIL_TO",
    "MAIL_FROM",
    "DOWNLOAD_FILE_PATH",
    "UPLOAD_DIR",
    "APP_ENV",
    "LOG_DIR",
    "LOG_LEVEL",
)


class InMemoryCityInfoRepository:
    """
    Dict-backed stand-in for CityInfoRepository.

    Loaded points are copies: edits only reach `self.points` on save_changes().
    """

    def __init__(self, cities: list[City]) -> None:
        self.cities: dict[int, City] = {}
        self.points: dict[int, PointOfInterest] = {}
        for city in cities:
            self.cities[city.id] = replace(city, points_of_interest=[])
            for point in city.points_of_interest:
                self.points[point.id] = replace(point, city_id=city.id)

        self.save_count = 0
        self._next_id = max(self.points, default=0) + 1
        self._loaded: dict[int, PointOfInterest] = {}
        self._inserts: list[PointOfInterest] = []
        self._deletes: list[PointOfInterest] = []

    def _load(self, stored: PointOfInterest) -> PointOfInterest:
        if stored.id not in self._loaded:
            self._loaded[stored.id] = replace(stored)
        return self._loaded[stored.id]

    async def get_cities_page(self, name, search_query, page_number, page_size):
        items = sorted(self.cities.values(), key=lambda c: (c.name, c.id))
        name = (name or "").strip()
        if name:
            items = [c for c in items if c.name == name]
        search_query = (search_query or "").strip()
        if search_query:
            items = [
                c
                for c in items
                if search_query in c.name or (c.description is not None and search_query in c.description)
            ]
        metadata = PaginationMetadata(
            total_item_count=len(items),
            page_size=page_size,
            current_page=page_number,
        )
        start = (page_number - 1) * page_size
        return [replace(c) for c in items[start : start + page_size]], metadata

    async def get_city(self, city_id, include_points_of_interest=False):
        city = self.cities.get(city_id)
        if city is None:
            return None
        city = replace(city, points_of_interest=[])
        if include_points_of_interest:
            city.points_of_interest = await self.get_points_of_interest_for_city(city_id)
        return city

    async def city_exists(self, city_id):
        return city_id in self.cities

    async def get_points_of_interest_for_city(self, city_id):
        stored = sorted((p for p in self.points.values() if p.city_id == city_id), key=lambda p: p.id)
        return [self._load(p) for p in stored]

    async def get_point_of_interest_for_city(self, city_id, point_of_interest_id):
        stored = self.points.get(point_of_interest_id)
        if stored is None or stored.city_id != city_id:
            return None
        return self._load(stored)

    async def add_point_of_interest_for_city(self, city_id, point_of_interest):
        if city_id not in self.cities:
            return None
        point_of_interest.city_id = city_id
        self._inserts.append(point_of_interest)

    def delete_point_of_interest(self, point_of_interest):
        self._deletes.append(point_of_interest)

    async def save_changes(self):
        for point in self._deletes:
            self.points.pop(point.id, None)
            self._loaded.pop(point.id, None)
        for point_id, point in self._loaded.items():
            if point_id in self.points:
                self.points[point_id] = replace(point)
        for point in self._inserts:
            point.id = self._next_id
            self._next_id += 1
            self.points[point.id] = replace(point)
            self._loaded[point.id] = point
        self._inserts = []
        self._deletes = []
        self.save_count += 1
        return True


def make_cities(count: int) -> list[City]:
    return [City(id=i, name=f"City {i:02d}", description=f"Description of city {i:02d}") for i in range(1, count + 1)]


def bearer(city: str = "Antwerp", user_id: int = 1) -> dict[str, str]:
    token = security.build_access_token(user_id=user_id, first_name="Nathan", last_name="Yates", city=city)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cities() -> list[City]:
    return [
        City(
            id=1,
            name="New York City",
            description="The one with that big park.",
            points_of_interest=[
                PointOfInterest(id=1, name="Central Park", description="The most visited urban park."),
                PointOfInterest(id=2, name="Empire State Building", description="A 102-story skyscraper."),
            ],
        ),
        City(
            id=2,
            name="Antwerp",
            description="The one with the cathedral that was never really finished.",
            points_of_interest=[
                PointOfInterest(id=3, name="Cathedral of Our Lady", description="A Gothic style cathedral."),
                PointOfInterest(id=4, name="Antwerp Central Station", description=None),
            ],
        ),
        City(
            id=3,
            name="Paris",
            description=None,
            points_of_interest=[
                PointOfInterest(id=5, name="Eiffel Tower", description="A wrought iron lattice tower."),
            ],
        ),
    ]


@pytest.fixture
def repository(cities: list[City]) -> InMemoryCityInfoRepository:
    return InMemoryCityInfoRepository(cities)


@pytest.fixture
def mail_service() -> MagicMock:
    return MagicMock(spec=MailService)


@pytest.fixture
def client(repository: InMemoryCityInfoRepository, mail_service: MagicMock):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_mail_service] = lambda: mail_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """
    Factory: `auth_headers("Paris")` -> Authorization header for that city claim.
    """
    return bearer


@pytest.fixture
def client_with_cities(mail_service: MagicMock):
    """
    Factory: a client backed by `count` generated cities ("City 01", ...).
    """

    def _client(count: int) -> TestClient:
        generated = InMemoryCityInfoRepository(make_cities(count))
        app.dependency_overrides[get_repository] = lambda: generated
        app.dependency_overrides[get_mail_service] = lambda: mail_service
        return TestClient(app)

    try:
        yield _client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash() -> str:
    """
    bcrypt hash of "P@ssw0rd", as stored in the users table.
    """
    return bcrypt.hashpw(b"P@ssw0rd", bcrypt.gensalt()).decode("utf-8")
