"""
PostgreSQL connection pool (asyncpg).

The pool is opened in the app lifespan (`api/main.py`) and closed on
shutdown. Handlers that work on cities and points of interest take one
pooled connection per request through `get_connection`; the repository
bound to it commits everything in a single transaction.

asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .settings import get_settings

# Upper bound of the `integer` id columns.
INT4_MAX = 2_147_483_647

_pool: asyncpg.Pool | None = None


def _strip_sslmode(url: str) -> str:
    # asyncpg rejects libpq's `sslmode` query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url
    kept = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "sslmode"]
    return urlunsplit(parts._replace(query=urlencode(kept)))


def resolve_dsn(dsn: str | None = None) -> str:
    """
    Explicit DSN wins; otherwise DATABASE_URL from settings.
    """
    url = (dsn or get_settings().database_url).strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _strip_sslmode(url)


async def init_pool(dsn: str | None = None) -> None:
    global _pool
    if _pool is not None:
        return
    settings = get_settings()
    _pool = await asyncpg.create_pool(
        dsn=resolve_dsn(dsn),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool is not open; the app lifespan opens it on startup.")
    return _pool


async def get_connection() -> AsyncIterator[asyncpg.Connection]:
    """
    FastAPI dependency: one pooled connection, released when the request ends.
    """
    async with pool().acquire() as conn:
        yield conn


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    row = await pool().fetchrow(sql, *args)
    return dict(row) if row is not None else None
