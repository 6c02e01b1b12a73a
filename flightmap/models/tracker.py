"""Tracker state and request models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from flightmap.models.flight import Flight
from flightmap.models.location import Location

ALLOWED_RADII: tuple[float, ...] = (0.5, 1.0, 1.5)


def validate_radius(radius: float) -> float:
    """Return ``radius`` if it is one of the supported search radii."""

    value = float(radius)
    if value not in ALLOWED_RADII:
        raise ValueError(
            f"radius must be one of {', '.join(str(r) for r in ALLOWED_RADII)}"
        )
    return value


class TrackerState(BaseModel):
    """UI state for one tracker session.

    Instances are treated as immutable; every transition produces a copy.
    """

    query: str = Field(default="", description="Search text as typed")
    radius: float = Field(default=0.5, description="Search radius in degrees")
    loading: bool = False
    error: str = Field(default="", description="Single user-visible message")
    searched_location: Optional[Location] = None
    flights: list[Flight] = Field(default_factory=list)
    show_map: bool = False
    search_count: int = Field(
        default=0, description="Number of searches submitted in this session"
    )

    @property
    def idle(self) -> bool:
        return not self.loading


class SearchRequest(BaseModel):
    """Body of a search submission."""

    query: str = Field(..., description="Airport code or city name")
    radius: Optional[float] = Field(
        default=None, description="Search radius in degrees (0.5, 1.0 or 1.5)"
    )

    @field_validator("radius")
    @classmethod
    def _check_radius(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        return validate_radius(value)


class SessionResponse(BaseModel):
    """Session identifier plus its current tracker state."""

    id: str
    state: TrackerState
    location_enabled: bool = False


__all__ = [
    "ALLOWED_RADII",
    "SearchRequest",
    "SessionResponse",
    "TrackerState",
    "validate_radius",
]
