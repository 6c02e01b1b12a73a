from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from flightmap.api import api_router
from flightmap.config import settings
from flightmap.services.sessions import session_registry

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("flightmap")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    logger.info(
        "Flight tracker starting (env=%s, flights=%s, geocoder=%s)",
        settings.flightmap_env,
        settings.opensky_base_url,
        settings.geocoder_base_url,
    )
    try:
        yield
    finally:
        # Stops device subscriptions and clears every map registry.
        await session_registry.close_all()
        logger.info("Tracker sessions closed")


app = FastAPI(title="Flightmap Live Flight Tracker", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "Flightmap tracker is running"}
