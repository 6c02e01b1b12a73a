"""Flight fetcher for aircraft state vectors using the OpenSky REST API."""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import httpx

from flightmap.config import settings
from flightmap.models.flight import BoundingBox, Flight
from flightmap.models.tracker import validate_radius

logger = logging.getLogger("flightmap.ingestors.opensky")

RATE_LIMIT_MESSAGE = (
    "Failed to fetch flight data. The API might be rate-limited. "
    "Try again in a few moments."
)
MISSING = "N/A"

# Positions within an OpenSky state vector
_ID, _CALLSIGN, _COUNTRY = 0, 1, 2
_LON, _LAT, _ALTITUDE, _ON_GROUND, _VELOCITY, _HEADING = 5, 6, 7, 8, 9, 10


class FlightDataUnavailable(RuntimeError):
    """The provider answered with a non-success status."""

    def __init__(self, status_code: int | None = None, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)
        self.status_code = status_code


class NoAircraftDetected(LookupError):
    """The provider answered successfully but reported no traffic."""


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _field(state: Sequence[Any], index: int) -> Any:
    return state[index] if len(state) > index else None


def _country(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return "Unknown"
    return (value if isinstance(value, str) else str(value)) or "Unknown"


def build_bounding_box(lat: float, lon: float, radius: float) -> BoundingBox:
    """Square box of ``radius`` degrees on each side of the center."""

    return BoundingBox(
        lat_min=lat - radius,
        lon_min=lon - radius,
        lat_max=lat + radius,
        lon_max=lon + radius,
    )


def normalize_state(state: Any, index: int) -> Flight:
    """Turn one raw state vector into a display-ready flight.

    Missing or malformed fields render as ``"N/A"``; nothing here raises.
    """

    if not isinstance(state, (list, tuple)):
        state = ()

    raw_id = _field(state, _ID)
    raw_callsign = _field(state, _CALLSIGN)
    callsign = raw_callsign.strip() if isinstance(raw_callsign, str) else ""

    latitude = _number(_field(state, _LAT))
    longitude = _number(_field(state, _LON))
    altitude = _number(_field(state, _ALTITUDE))
    velocity = _number(_field(state, _VELOCITY))
    heading = _number(_field(state, _HEADING))

    return Flight(
        id=str(raw_id) if raw_id else f"flight-{index}",
        callsign=callsign or MISSING,
        country=_country(_field(state, _COUNTRY)),
        latitude=latitude,
        longitude=longitude,
        altitude=f"{round_half_up(altitude)} m" if altitude is not None else MISSING,
        velocity=(
            f"{round_half_up(velocity * 3.6)} km/h" if velocity is not None else MISSING
        ),
        heading=f"{round_half_up(heading)}°" if heading is not None else MISSING,
        heading_deg=heading if heading is not None else 0.0,
        on_ground=bool(_field(state, _ON_GROUND)),
    )


class FlightFetcher:
    """Fetch airborne aircraft around a point from the flight-state provider."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.opensky_base_url
        self.timeout = timeout or settings.opensky_timeout
        self.transport = transport

    async def fetch_flights(
        self, lat: float, lon: float, radius: float
    ) -> list[Flight]:
        """Return normalized airborne flights inside the radius box.

        Raises ``FlightDataUnavailable`` on a non-success response and
        ``NoAircraftDetected`` when the provider reports no states at all.
        Transport errors from httpx propagate unchanged.
        """

        box = build_bounding_box(lat, lon, validate_radius(radius))

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.get(self.base_url, params=box.as_params())

        if response.status_code == 429:
            logger.warning("Flight provider rate limit encountered: %s", response.text)
            raise FlightDataUnavailable(response.status_code)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Flight provider returned HTTP %s: %s", exc.response.status_code, exc
            )
            raise FlightDataUnavailable(exc.response.status_code) from exc

        payload = response.json()
        raw_states = []
        if isinstance(payload, dict):
            raw_states = payload.get("states") or []

        if not raw_states:
            raise NoAircraftDetected(
                f"No states reported for box {box.as_params()}"
            )

        flights = [normalize_state(state, index) for index, state in enumerate(raw_states)]
        airborne = [flight for flight in flights if not flight.on_ground]
        logger.debug(
            "Fetched %s states, %s airborne", len(flights), len(airborne)
        )
        return airborne


__all__ = [
    "FlightDataUnavailable",
    "FlightFetcher",
    "NoAircraftDetected",
    "RATE_LIMIT_MESSAGE",
    "build_bounding_box",
    "normalize_state",
    "round_half_up",
]
