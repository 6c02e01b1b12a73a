"""A live map view: surface, aircraft registry, device overlay and center pin."""

from __future__ import annotations

import logging
from typing import Iterable

from flightmap.models.flight import Flight
from flightmap.models.location import Location
from flightmap.models.map import MapSnapshot
from flightmap.services import icons
from flightmap.services.map_reconciler import FlightMapReconciler, ReconcileResult
from flightmap.services.map_surface import RetainedMapSurface
from flightmap.services.user_location import UserLocationOverlay

logger = logging.getLogger("flightmap.services.map_view")


class MapView:
    def __init__(self, location: Location) -> None:
        self.location = location
        self.surface = RetainedMapSurface((location.latitude, location.longitude))
        self.reconciler = FlightMapReconciler(self.surface)
        self.user_overlay = UserLocationOverlay(self.surface)
        self.center_marker = self._add_center_marker(location)
        self._aircraft_count = 0

    def _add_center_marker(self, location: Location) -> str:
        return self.surface.add_marker(
            (location.latitude, location.longitude),
            icons.center_icon(),
            icon_size=icons.CENTER_ICON_SIZE,
            popup_html=icons.popup(location.name, []),
        )

    def recenter(self, location: Location) -> None:
        """Move the view and center pin to a new search location.

        Aircraft tracks are kept; the next reconcile evicts whatever is no
        longer reported.
        """

        if location == self.location:
            return
        self.surface.remove(self.center_marker)
        self.location = location
        self.surface.set_view((location.latitude, location.longitude))
        self.center_marker = self._add_center_marker(location)
        logger.info("Map view recentered on %s", location.name)

    def show_flights(self, flights: Iterable[Flight]) -> ReconcileResult:
        flights = list(flights)
        self._aircraft_count = len(flights)
        return self.reconciler.reconcile(flights)

    def snapshot(self) -> MapSnapshot:
        snapshot = self.surface.snapshot()
        snapshot.aircraft_count = self._aircraft_count
        snapshot.location_enabled = self.user_overlay.enabled
        return snapshot

    def render_html(self) -> str:
        return self.surface.render_html()

    async def close(self) -> None:
        await self.user_overlay.stop_tracking()
        self.reconciler.clear()


__all__ = ["MapView"]
