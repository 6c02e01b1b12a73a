"""Data providers for flightmap."""

from .geocoding import LocationResolver
from .opensky import (
    FlightDataUnavailable,
    FlightFetcher,
    NoAircraftDetected,
    build_bounding_box,
    normalize_state,
)

__all__ = [
    "FlightDataUnavailable",
    "FlightFetcher",
    "LocationResolver",
    "NoAircraftDetected",
    "build_bounding_box",
    "normalize_state",
]
