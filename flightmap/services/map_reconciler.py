"""Keep on-map aircraft markers and their tracks in step with the flight list."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Optional

from flightmap.models.flight import Flight
from flightmap.services import icons
from flightmap.services.map_surface import LatLng, MapSurface

logger = logging.getLogger("flightmap.services.map_reconciler")

AIRCRAFT_Z_INDEX = 1000


@dataclass
class TrackedMarker:
    """Rendered state for one aircraft, keyed by flight id."""

    marker: str
    track: list[LatLng] = field(default_factory=list)
    polyline: Optional[str] = None


@dataclass
class ReconcileResult:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    evicted: list[str] = field(default_factory=list)


def _flight_popup(flight: Flight) -> str:
    return icons.popup(
        flight.callsign,
        [
            f"Country: {flight.country}",
            f"Altitude: {flight.altitude}",
            f"Speed: {flight.velocity}",
            f"Heading: {flight.heading}",
        ],
    )


class FlightMapReconciler:
    """Owns the flight id -> ``TrackedMarker`` registry for one map view.

    The registry lives as long as the view, so tracks keep growing across
    fetches; an aircraft is forgotten as soon as it is missing from a cycle.
    """

    def __init__(self, surface: MapSurface) -> None:
        self.surface = surface
        self._markers: dict[str, TrackedMarker] = {}

    def __len__(self) -> int:
        return len(self._markers)

    def __contains__(self, flight_id: object) -> bool:
        return flight_id in self._markers

    def tracked_ids(self) -> set[str]:
        return set(self._markers)

    def track(self, flight_id: str) -> list[LatLng]:
        return list(self._markers[flight_id].track)

    def get(self, flight_id: str) -> Optional[TrackedMarker]:
        return self._markers.get(flight_id)

    def reconcile(self, flights: Iterable[Flight]) -> ReconcileResult:
        # Flights without a position cannot be drawn and count as absent.
        placeable = [flight for flight in flights if flight.position is not None]
        current_ids = {flight.id for flight in placeable}
        result = ReconcileResult()

        for flight_id in list(self._markers):
            if flight_id not in current_ids:
                self._evict(flight_id)
                result.evicted.append(flight_id)

        for flight in placeable:
            if flight.id in self._markers:
                self._update(self._markers[flight.id], flight)
                result.updated.append(flight.id)
            else:
                self._create(flight)
                result.created.append(flight.id)

        logger.debug(
            "Reconciled map: %s created, %s updated, %s evicted",
            len(result.created),
            len(result.updated),
            len(result.evicted),
        )
        return result

    def clear(self) -> None:
        for flight_id in list(self._markers):
            self._evict(flight_id)

    def _evict(self, flight_id: str) -> None:
        tracked = self._markers.pop(flight_id)
        self.surface.remove(tracked.marker)
        if tracked.polyline is not None:
            self.surface.remove(tracked.polyline)

    def _update(self, tracked: TrackedMarker, flight: Flight) -> None:
        position = flight.position
        self.surface.move_marker(tracked.marker, position)
        self.surface.set_marker_icon(tracked.marker, icons.plane_icon(flight.heading_deg))

        if not tracked.track or tracked.track[-1] != position:
            tracked.track.append(position)

        if tracked.polyline is not None:
            self.surface.set_polyline_points(tracked.polyline, tracked.track)
        elif len(tracked.track) > 1:
            tracked.polyline = self.surface.add_polyline(tracked.track)

    def _create(self, flight: Flight) -> None:
        position = flight.position
        marker = self.surface.add_marker(
            position,
            icons.plane_icon(flight.heading_deg),
            icon_size=icons.PLANE_ICON_SIZE,
            popup_html=_flight_popup(flight),
            z_index_offset=AIRCRAFT_Z_INDEX,
        )
        self._markers[flight.id] = TrackedMarker(marker=marker, track=[position])


__all__ = ["FlightMapReconciler", "ReconcileResult", "TrackedMarker"]
