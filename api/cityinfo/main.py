import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cityinfo.auth import router as auth_router
from cityinfo.cities import router as cities_router
from cityinfo.core import db
from cityinfo.core.errors import register_exception_handlers
from cityinfo.core.logging_config import configure_logging
from cityinfo.core.settings import get_settings
from cityinfo.files import router as files_router
from cityinfo.points_of_interest import router as points_of_interest_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(get_settings())
    # Initialize the DB pool once per process.
    await db.init_pool()
    logger.info("CityInfo API started.")
    try:
        yield
    finally:
        await db.close_pool()
        logger.info("CityInfo API stopped.")


app = FastAPI(title="CityInfo API", lifespan=lifespan)

register_exception_handlers(app)

app.include_router(auth_router.router, tags=["authentication"])
app.include_router(cities_router.router, tags=["cities"])
app.include_router(points_of_interest_router.router, tags=["points of interest"])
app.include_router(files_router.router, tags=["files"])


@app.get("/health")
async def health() -> dict:
    await db.fetch_one("SELECT 1 AS ok")
    return {"status": "ok"}
