"""Health check endpoint."""

from fastapi import APIRouter, Depends

from flightmap.config import settings
from flightmap.services import SessionRegistry, get_session_registry

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(
    registry: SessionRegistry = Depends(get_session_registry),
) -> dict[str, str | int]:
    """Report liveness and how many tracker sessions are open."""
    return {"status": "ok", "env": settings.flightmap_env, "sessions": len(registry)}
