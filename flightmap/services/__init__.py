"""Service-layer components for flightmap."""

from .list_renderer import render_flight_card, render_flight_cards
from .map_reconciler import FlightMapReconciler, ReconcileResult, TrackedMarker
from .map_surface import MapSurface, RetainedMapSurface
from .map_view import MapView
from .sessions import (
    MapNotShown,
    SessionRegistry,
    TrackerSession,
    get_session_registry,
    session_registry,
)
from .tracker import TrackerController, reduce
from .user_location import DeviceSubscription, UserLocationOverlay

__all__ = [
    "DeviceSubscription",
    "FlightMapReconciler",
    "MapNotShown",
    "MapSurface",
    "MapView",
    "ReconcileResult",
    "RetainedMapSurface",
    "SessionRegistry",
    "TrackedMarker",
    "TrackerController",
    "TrackerSession",
    "UserLocationOverlay",
    "get_session_registry",
    "reduce",
    "render_flight_card",
    "render_flight_cards",
    "session_registry",
]
