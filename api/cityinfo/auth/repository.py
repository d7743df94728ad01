"""
Auth persistence helpers.
"""

from __future__ import annotations

from cityinfo.core import db


def normalize_username(username: str) -> str:
    return (username or "").strip()


async def get_user_by_username(username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, password_hash, first_name, last_name, city
        FROM users
        WHERE lower(username) = lower($1)
        """,
        normalize_username(username),
    )
