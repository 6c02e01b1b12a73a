"""Configuration settings for the flightmap service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("flightmap.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", env_var, value, default)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    flightmap_env: str = os.getenv("FLIGHTMAP_ENV", "local")
    log_level: str = os.getenv("FLIGHTMAP_LOG_LEVEL", "INFO")

    # Flight-state provider
    opensky_base_url: str = os.getenv(
        "OPENSKY_BASE_URL",
        "https://opensky-network.org/api/states/all",
    )
    opensky_timeout: float = _get_float("OPENSKY_TIMEOUT", 10.0)

    # Geocoding provider
    geocoder_base_url: str = os.getenv(
        "GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org/search"
    )
    geocoder_timeout: float = _get_float("GEOCODER_TIMEOUT", 10.0)
    geocoder_user_agent: str = os.getenv(
        "GEOCODER_USER_AGENT", "flightmap/0.1 (live flight tracker)"
    )

    # Map rendering
    map_tile_url: str = os.getenv(
        "MAP_TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    )
    map_tile_attribution: str = os.getenv(
        "MAP_TILE_ATTRIBUTION", "© OpenStreetMap contributors"
    )
    map_max_zoom: int = int(os.getenv("MAP_MAX_ZOOM", "19"))
    map_default_zoom: int = int(os.getenv("MAP_DEFAULT_ZOOM", "10"))
    map_prefer_canvas: bool = _get_bool("MAP_PREFER_CANVAS", default=True)

    # Initial search center before any query resolves (Bangalore)
    default_lat: float = _get_float("FLIGHTMAP_DEFAULT_LAT", 12.9716)
    default_lon: float = _get_float("FLIGHTMAP_DEFAULT_LON", 77.5946)
    default_location_name: str = os.getenv("FLIGHTMAP_DEFAULT_NAME", "Bangalore")
    default_radius: float = _get_float("FLIGHTMAP_DEFAULT_RADIUS", 0.5)

    # Device position / orientation streams
    device_stream_min_interval: float = _get_float("DEVICE_STREAM_MIN_INTERVAL", 0.2)

    # Sessions untouched for this many seconds are closed when a new one opens
    session_idle_timeout: float = _get_float("SESSION_IDLE_TIMEOUT", 1800.0)


settings = Settings()

__all__ = ["settings", "Settings"]
