"""
Per-request repository wiring.
"""

from __future__ import annotations

import asyncpg
from fastapi import Depends

from cityinfo.core import db

from .repository import CityInfoRepository


async def get_repository(conn: asyncpg.Connection = Depends(db.get_connection)) -> CityInfoRepository:
    return CityInfoRepository(conn)
