"""Pydantic models for the flightmap service."""

from .cards import CardField, FlightCard, FlightList
from .flight import BoundingBox, Flight, FlightSearchResponse
from .location import DeviceCapabilities, Location, OrientationSample, UserPosition
from .map import CircleModel, MapSnapshot, MarkerModel, PolylineModel
from .tracker import (
    ALLOWED_RADII,
    SearchRequest,
    SessionResponse,
    TrackerState,
    validate_radius,
)

__all__ = [
    "ALLOWED_RADII",
    "BoundingBox",
    "CardField",
    "CircleModel",
    "DeviceCapabilities",
    "Flight",
    "FlightCard",
    "FlightList",
    "FlightSearchResponse",
    "Location",
    "MapSnapshot",
    "MarkerModel",
    "OrientationSample",
    "PolylineModel",
    "SearchRequest",
    "SessionResponse",
    "TrackerState",
    "UserPosition",
    "validate_radius",
]
