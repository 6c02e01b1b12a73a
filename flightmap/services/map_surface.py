"""Map drawing surface: an owned registry of markers, paths and circles.

The reconciler and overlays only talk to the ``MapSurface`` protocol and keep
opaque handles. ``RetainedMapSurface`` stores the drawn objects in memory so
the current picture can be serialized or rendered with folium on demand.
"""

from __future__ import annotations

import itertools
import logging
from typing import Optional, Protocol, Sequence

import folium

from flightmap.config import settings
from flightmap.models.map import CircleModel, MapSnapshot, MarkerModel, PolylineModel

logger = logging.getLogger("flightmap.services.map_surface")

LatLng = tuple[float, float]


class MapSurface(Protocol):
    """Create/update/destroy operations on retained map objects."""

    def add_marker(
        self,
        position: LatLng,
        icon_html: str,
        *,
        icon_size: int,
        popup_html: Optional[str] = None,
        z_index_offset: int = 0,
    ) -> str:
        """Draw a marker and return its handle."""

    def move_marker(self, handle: str, position: LatLng) -> None:
        ...

    def set_marker_icon(self, handle: str, icon_html: str) -> None:
        ...

    def add_polyline(self, points: Sequence[LatLng]) -> str:
        ...

    def set_polyline_points(self, handle: str, points: Sequence[LatLng]) -> None:
        ...

    def add_circle(self, position: LatLng, radius: float) -> str:
        ...

    def move_circle(self, handle: str, position: LatLng, radius: float) -> None:
        ...

    def remove(self, handle: str) -> None:
        """Remove any object by handle; unknown handles are ignored."""


class RetainedMapSurface:
    """In-memory ``MapSurface`` that can be snapshotted or drawn with folium."""

    def __init__(
        self,
        center: LatLng,
        *,
        zoom: int | None = None,
        tile_url: str | None = None,
        attribution: str | None = None,
    ) -> None:
        self.center = center
        self.zoom = zoom or settings.map_default_zoom
        self.tile_url = tile_url or settings.map_tile_url
        self.attribution = attribution or settings.map_tile_attribution
        self._ids = itertools.count(1)
        self.markers: dict[str, MarkerModel] = {}
        self.polylines: dict[str, PolylineModel] = {}
        self.circles: dict[str, CircleModel] = {}

    def _next_id(self, kind: str) -> str:
        return f"{kind}-{next(self._ids)}"

    def set_view(self, center: LatLng, zoom: int | None = None) -> None:
        self.center = center
        if zoom is not None:
            self.zoom = zoom

    def add_marker(
        self,
        position: LatLng,
        icon_html: str,
        *,
        icon_size: int,
        popup_html: Optional[str] = None,
        z_index_offset: int = 0,
    ) -> str:
        handle = self._next_id("marker")
        self.markers[handle] = MarkerModel(
            id=handle,
            latitude=position[0],
            longitude=position[1],
            icon_html=icon_html,
            icon_size=icon_size,
            popup_html=popup_html,
            z_index_offset=z_index_offset,
        )
        return handle

    def move_marker(self, handle: str, position: LatLng) -> None:
        marker = self.markers[handle]
        marker.latitude, marker.longitude = position

    def set_marker_icon(self, handle: str, icon_html: str) -> None:
        self.markers[handle].icon_html = icon_html

    def add_polyline(self, points: Sequence[LatLng]) -> str:
        handle = self._next_id("path")
        self.polylines[handle] = PolylineModel(id=handle, points=list(points))
        return handle

    def set_polyline_points(self, handle: str, points: Sequence[LatLng]) -> None:
        self.polylines[handle].points = list(points)

    def add_circle(self, position: LatLng, radius: float) -> str:
        handle = self._next_id("circle")
        self.circles[handle] = CircleModel(
            id=handle, latitude=position[0], longitude=position[1], radius=radius
        )
        return handle

    def move_circle(self, handle: str, position: LatLng, radius: float) -> None:
        circle = self.circles[handle]
        circle.latitude, circle.longitude = position
        circle.radius = radius

    def remove(self, handle: str) -> None:
        for registry in (self.markers, self.polylines, self.circles):
            if registry.pop(handle, None) is not None:
                return
        logger.debug("Ignoring removal of unknown map handle %s", handle)

    def snapshot(self) -> MapSnapshot:
        return MapSnapshot(
            center=self.center,
            zoom=self.zoom,
            tile_url=self.tile_url,
            attribution=self.attribution,
            markers=[m.model_copy() for m in self.markers.values()],
            polylines=[p.model_copy(deep=True) for p in self.polylines.values()],
            circles=[c.model_copy() for c in self.circles.values()],
        )

    def to_folium(self) -> folium.Map:
        """Draw the current objects onto a new folium map."""

        fmap = folium.Map(
            location=list(self.center),
            zoom_start=self.zoom,
            tiles=None,
            prefer_canvas=settings.map_prefer_canvas,
        )
        folium.TileLayer(
            tiles=self.tile_url,
            attr=self.attribution,
            max_zoom=settings.map_max_zoom,
            name="base",
        ).add_to(fmap)

        for path in self.polylines.values():
            folium.PolyLine(
                locations=[list(point) for point in path.points],
                color=path.color,
                weight=path.weight,
                opacity=path.opacity,
            ).add_to(fmap)

        for circle in self.circles.values():
            folium.Circle(
                location=[circle.latitude, circle.longitude],
                radius=circle.radius,
                color=circle.color,
                weight=2,
                fill=True,
                fill_color=circle.color,
                fill_opacity=circle.fill_opacity,
            ).add_to(fmap)

        for marker in self.markers.values():
            half = marker.icon_size // 2
            folium.Marker(
                location=[marker.latitude, marker.longitude],
                icon=folium.DivIcon(
                    html=marker.icon_html,
                    icon_size=(marker.icon_size, marker.icon_size),
                    icon_anchor=(half, half),
                    class_name="flightmap-icon",
                ),
                popup=folium.Popup(marker.popup_html) if marker.popup_html else None,
                z_index_offset=marker.z_index_offset,
            ).add_to(fmap)

        return fmap

    def render_html(self) -> str:
        return self.to_folium().get_root().render()


__all__ = ["LatLng", "MapSurface", "RetainedMapSurface"]
