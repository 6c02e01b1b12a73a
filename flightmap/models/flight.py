"""Models for normalized flight-state records."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BoundingBox(BaseModel):
    """Axis-aligned lat/lon region used to scope a flight-state query."""

    lat_min: float = Field(..., description="Southern edge in decimal degrees")
    lon_min: float = Field(..., description="Western edge in decimal degrees")
    lat_max: float = Field(..., description="Northern edge in decimal degrees")
    lon_max: float = Field(..., description="Eastern edge in decimal degrees")

    def as_params(self) -> dict[str, float]:
        """Query parameters understood by the flight-state provider."""

        return {
            "lamin": self.lat_min,
            "lomin": self.lon_min,
            "lamax": self.lat_max,
            "lomax": self.lon_max,
        }


class Flight(BaseModel):
    """Display-ready representation of one tracked aircraft."""

    id: str = Field(..., description="Provider identifier or index placeholder")
    callsign: str = Field(default="N/A", description="Trimmed callsign")
    country: str = Field(default="Unknown", description="Origin country")
    latitude: Optional[float] = Field(
        default=None, description="Latitude in decimal degrees"
    )
    longitude: Optional[float] = Field(
        default=None, description="Longitude in decimal degrees"
    )
    altitude: str = Field(default="N/A", description="Altitude, e.g. '3658 m'")
    velocity: str = Field(default="N/A", description="Speed, e.g. '593 km/h'")
    heading: str = Field(default="N/A", description="Heading, e.g. '90°'")
    heading_deg: float = Field(
        default=0.0, description="Numeric heading used to rotate map icons"
    )
    on_ground: bool = Field(default=False, description="Provider on-ground flag")

    model_config = ConfigDict(extra="ignore")

    @property
    def position(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    @property
    def latitude_display(self) -> str:
        return f"{self.latitude:.4f}" if self.latitude is not None else "N/A"

    @property
    def longitude_display(self) -> str:
        return f"{self.longitude:.4f}" if self.longitude is not None else "N/A"


class FlightSearchResponse(BaseModel):
    """Flights found around a point, with an optional informational message."""

    bounding_box: BoundingBox
    flights: list[Flight] = Field(default_factory=list)
    message: Optional[str] = Field(
        default=None, description="Informational message, e.g. no traffic"
    )


__all__ = ["BoundingBox", "Flight", "FlightSearchResponse"]
