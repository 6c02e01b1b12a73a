"""Per-user tracker sessions and their in-memory registry."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Optional
from uuid import uuid4

from flightmap.config import settings
from flightmap.models.location import Location
from flightmap.models.tracker import SessionResponse, TrackerState
from flightmap.services.map_view import MapView
from flightmap.services.tracker import TrackerController

logger = logging.getLogger("flightmap.services.sessions")


def default_location() -> Location:
    return Location(
        latitude=settings.default_lat,
        longitude=settings.default_lon,
        name=settings.default_location_name,
        query=settings.default_location_name,
    )


class MapNotShown(RuntimeError):
    """The session is in list view, so there is no map to read."""


class TrackerSession:
    """One user's tracker controller plus the map view while it is shown."""

    def __init__(
        self, session_id: str, controller: TrackerController, last_active: float = 0.0
    ) -> None:
        self.id = session_id
        self.controller = controller
        self.map_view: Optional[MapView] = None
        self.last_active = last_active

    @property
    def state(self) -> TrackerState:
        return self.controller.state

    def describe(self) -> SessionResponse:
        return SessionResponse(
            id=self.id,
            state=self.state,
            location_enabled=bool(self.map_view and self.map_view.user_overlay.enabled),
        )

    def require_map(self) -> MapView:
        if self.map_view is None:
            raise MapNotShown(f"Session {self.id} is showing the list view")
        return self.map_view

    async def search(self, query: str, radius: Optional[float] = None) -> TrackerState:
        state = await self.controller.submit(query, radius)
        self._sync_map()
        return state

    async def refresh(self) -> TrackerState:
        state = await self.controller.refresh()
        self._sync_map()
        return state

    async def toggle_view(self) -> TrackerState:
        state = self.controller.toggle_view()
        if state.show_map and self.map_view is None:
            self.map_view = MapView(state.searched_location or default_location())
            self._sync_map()
        elif not state.show_map and self.map_view is not None:
            await self.map_view.close()
            self.map_view = None
        return state

    def _sync_map(self) -> None:
        if self.map_view is None:
            return
        state = self.state
        if state.searched_location is not None:
            self.map_view.recenter(state.searched_location)
        self.map_view.show_flights(state.flights)

    async def close(self) -> None:
        if self.map_view is not None:
            await self.map_view.close()
            self.map_view = None


class SessionRegistry:
    """Lock-guarded mapping of session id to ``TrackerSession``.

    Each lookup marks the session active. Sessions left idle longer than
    ``idle_timeout`` seconds are closed the next time a session is created.
    """

    def __init__(
        self,
        controller_factory: Callable[[], TrackerController] = TrackerController,
        *,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._controller_factory = controller_factory
        self.idle_timeout = (
            settings.session_idle_timeout if idle_timeout is None else idle_timeout
        )
        self._clock = clock
        self._sessions: dict[str, TrackerSession] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    async def create(self) -> TrackerSession:
        await self.prune_idle()
        session = TrackerSession(
            str(uuid4()), self._controller_factory(), last_active=self._clock()
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Created tracker session %s", session.id)
        return session

    def get(self, session_id: str) -> TrackerSession:
        with self._lock:
            session = self._sessions[session_id]
            session.last_active = self._clock()
        return session

    async def prune_idle(self) -> int:
        """Close sessions idle for longer than ``idle_timeout``."""

        if self.idle_timeout <= 0:
            return 0
        cutoff = self._clock() - self.idle_timeout
        with self._lock:
            stale = [s for s in self._sessions.values() if s.last_active < cutoff]
            for session in stale:
                del self._sessions[session.id]
        for session in stale:
            await session.close()
            logger.info("Closed idle tracker session %s", session.id)
        return len(stale)

    async def remove(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id)
        await session.close()
        logger.info("Closed tracker session %s", session_id)

    async def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            await session.close()


session_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    """FastAPI dependency returning the process-wide registry."""

    return session_registry


__all__ = [
    "MapNotShown",
    "SessionRegistry",
    "TrackerSession",
    "default_location",
    "get_session_registry",
    "session_registry",
]
