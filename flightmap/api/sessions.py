"""Tracker session endpoints: search, view toggle, list/map views, device location."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse

from flightmap.models import (
    DeviceCapabilities,
    FlightList,
    MapSnapshot,
    OrientationSample,
    SearchRequest,
    SessionResponse,
    UserPosition,
)
from flightmap.services import (
    MapNotShown,
    MapView,
    SessionRegistry,
    TrackerSession,
    get_session_registry,
    render_flight_cards,
)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])

logger = logging.getLogger("flightmap.api.sessions")


def get_session(
    session_id: str, registry: SessionRegistry = Depends(get_session_registry)
) -> TrackerSession:
    try:
        return registry.get(session_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        ) from None


def _require_map(session: TrackerSession) -> MapView:
    try:
        return session.require_map()
    except MapNotShown as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a tracker session",
)
async def create_session(
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionResponse:
    session = await registry.create()
    return session.describe()


@router.get("/{session_id}", response_model=SessionResponse, summary="Session state")
async def read_session(session: TrackerSession = Depends(get_session)) -> SessionResponse:
    return session.describe()


@router.delete(
    "/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="End a session"
)
async def delete_session(
    session: TrackerSession = Depends(get_session),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Response:
    await registry.remove(session.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/search",
    response_model=SessionResponse,
    summary="Track flights around an airport code or city",
)
async def search(
    request: SearchRequest, session: TrackerSession = Depends(get_session)
) -> SessionResponse:
    """Resolve the query and load flights; failures are reported in ``state.error``."""

    await session.search(request.query, request.radius)
    return session.describe()


@router.post(
    "/{session_id}/refresh",
    response_model=SessionResponse,
    summary="Fetch flights again for the current location",
)
async def refresh(session: TrackerSession = Depends(get_session)) -> SessionResponse:
    await session.refresh()
    return session.describe()


@router.post(
    "/{session_id}/view",
    response_model=SessionResponse,
    summary="Switch between list and map views",
)
async def toggle_view(session: TrackerSession = Depends(get_session)) -> SessionResponse:
    await session.toggle_view()
    return session.describe()


@router.get("/{session_id}/list", response_model=FlightList, summary="Flight cards")
async def flight_list(session: TrackerSession = Depends(get_session)) -> FlightList:
    return render_flight_cards(session.state.flights)


@router.get("/{session_id}/map", response_model=MapSnapshot, summary="Map contents")
async def map_snapshot(session: TrackerSession = Depends(get_session)) -> MapSnapshot:
    return _require_map(session).snapshot()


@router.get(
    "/{session_id}/map.html",
    response_class=HTMLResponse,
    summary="Map rendered as a standalone HTML page",
)
async def map_html(session: TrackerSession = Depends(get_session)) -> HTMLResponse:
    return HTMLResponse(_require_map(session).render_html())


@router.post(
    "/{session_id}/location/start",
    response_model=SessionResponse,
    summary="Start following the device position",
)
async def start_location(
    capabilities: DeviceCapabilities, session: TrackerSession = Depends(get_session)
) -> SessionResponse:
    _require_map(session).user_overlay.start_tracking(capabilities)
    return session.describe()


@router.post("/{session_id}/location/position", summary="Device position sample")
async def push_position(
    position: UserPosition, session: TrackerSession = Depends(get_session)
) -> dict[str, bool]:
    accepted = _require_map(session).user_overlay.publish_position(position)
    return {"accepted": accepted}


@router.post("/{session_id}/location/orientation", summary="Device compass sample")
async def push_orientation(
    sample: OrientationSample, session: TrackerSession = Depends(get_session)
) -> dict[str, bool]:
    accepted = _require_map(session).user_overlay.publish_orientation(sample)
    return {"accepted": accepted}


@router.post(
    "/{session_id}/location/stop",
    response_model=SessionResponse,
    summary="Stop following the device position",
)
async def stop_location(session: TrackerSession = Depends(get_session)) -> SessionResponse:
    await _require_map(session).user_overlay.stop_tracking()
    return session.describe()
