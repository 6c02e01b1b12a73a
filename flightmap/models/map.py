"""Serializable view of everything drawn on a map view."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class MarkerModel(BaseModel):
    """A point marker with an HTML/SVG icon."""

    id: str
    latitude: float
    longitude: float
    icon_html: str = Field(..., description="Rendered icon markup")
    icon_size: int = Field(default=32, description="Square icon size in pixels")
    popup_html: Optional[str] = None
    z_index_offset: int = 0


class PolylineModel(BaseModel):
    """A non-interactive path overlay."""

    id: str
    points: list[tuple[float, float]] = Field(default_factory=list)
    color: str = "#10B981"
    weight: int = 2
    opacity: float = 0.7


class CircleModel(BaseModel):
    """A radius overlay in meters, used for position accuracy."""

    id: str
    latitude: float
    longitude: float
    radius: float
    color: str = "#3B82F6"
    fill_opacity: float = 0.1


class MapSnapshot(BaseModel):
    """Everything currently on a map, plus its view settings."""

    center: tuple[float, float]
    zoom: int
    tile_url: str
    attribution: str
    markers: list[MarkerModel] = Field(default_factory=list)
    polylines: list[PolylineModel] = Field(default_factory=list)
    circles: list[CircleModel] = Field(default_factory=list)
    aircraft_count: int = 0
    location_enabled: bool = False


__all__ = ["CircleModel", "MapSnapshot", "MarkerModel", "PolylineModel"]
