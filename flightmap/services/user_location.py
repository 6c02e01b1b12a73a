"""Device position and compass overlay for a map view."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import AsyncIterator, Callable, Generic, Optional, TypeVar

from flightmap.config import settings
from flightmap.models.location import DeviceCapabilities, OrientationSample, UserPosition
from flightmap.services import icons
from flightmap.services.map_surface import MapSurface

logger = logging.getLogger("flightmap.services.user_location")

USER_Z_INDEX = 2000

T = TypeVar("T")


class DeviceSubscription(Generic[T]):
    """Push-driven stream of device samples with a minimum spacing.

    Samples arriving sooner than ``min_interval`` after the last accepted one
    are dropped. Iteration ends once ``unsubscribe`` is called.
    """

    def __init__(
        self,
        name: str,
        *,
        min_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.min_interval = (
            settings.device_stream_min_interval if min_interval is None else min_interval
        )
        self._clock = clock
        self._queue: asyncio.Queue = asyncio.Queue()
        self._last_accepted: float | None = None
        self.closed = False

    def publish(self, sample: T) -> bool:
        """Queue a sample; returns False when it was dropped."""

        if self.closed:
            return False
        now = self._clock()
        if self._last_accepted is not None and now - self._last_accepted < self.min_interval:
            return False
        self._last_accepted = now
        self._queue.put_nowait(sample)
        return True

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(None)

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            sample = await self._queue.get()
            if sample is None or self.closed:
                return
            yield sample


class UserLocationOverlay:
    """Marker plus accuracy circle following the device, rotated by compass."""

    def __init__(self, surface: MapSurface) -> None:
        self.surface = surface
        self.marker: Optional[str] = None
        self.circle: Optional[str] = None
        self.heading: float = 0.0
        self.enabled = False
        self.positions: Optional[DeviceSubscription[UserPosition]] = None
        self.orientations: Optional[DeviceSubscription[OrientationSample]] = None
        self._tasks: list[asyncio.Task] = []

    @property
    def tracking(self) -> bool:
        return self.positions is not None

    def start_tracking(self, capabilities: DeviceCapabilities) -> bool:
        """Open device subscriptions; a missing capability is a silent no-op.

        Calling again while tracking adds the compass stream if orientation
        has since become usable. Must be called from a running event loop.
        """

        if not self.tracking:
            if not capabilities.geolocation:
                logger.info("Geolocation not supported; location overlay unavailable")
                return False
            self.positions = DeviceSubscription("position")
            self._tasks.append(
                asyncio.create_task(self._consume(self.positions, self.apply_position))
            )

        if self.orientations is not None:
            return True
        if capabilities.orientation_usable:
            self.orientations = DeviceSubscription("orientation")
            self._tasks.append(
                asyncio.create_task(
                    self._consume(self.orientations, self.apply_orientation)
                )
            )
        elif capabilities.orientation:
            logger.info(
                "Orientation permission %s; compass heading disabled",
                capabilities.orientation_permission,
            )
        return True

    async def stop_tracking(self) -> None:
        for subscription in (self.positions, self.orientations):
            if subscription is not None:
                subscription.unsubscribe()
        self.positions = None
        self.orientations = None

        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self.marker is not None:
            self.surface.remove(self.marker)
            self.marker = None
        if self.circle is not None:
            self.surface.remove(self.circle)
            self.circle = None
        self.enabled = False

    def publish_position(self, position: UserPosition) -> bool:
        if self.positions is None:
            return False
        return self.positions.publish(position)

    def publish_orientation(self, sample: OrientationSample) -> bool:
        if self.orientations is None:
            return False
        return self.orientations.publish(sample)

    def apply_position(self, position: UserPosition) -> None:
        point = (position.latitude, position.longitude)
        if self.marker is not None:
            self.surface.move_marker(self.marker, point)
            self.surface.set_marker_icon(self.marker, icons.user_icon(self.heading))
            if self.circle is not None:
                self.surface.move_circle(self.circle, point, position.accuracy)
        else:
            self.marker = self.surface.add_marker(
                point,
                icons.user_icon(self.heading),
                icon_size=icons.USER_ICON_SIZE,
                popup_html=icons.popup(
                    "Your Location",
                    [
                        f"Lat: {position.latitude:.5f}",
                        f"Lon: {position.longitude:.5f}",
                        f"Accuracy: ±{position.accuracy:.0f}m",
                    ],
                ),
                z_index_offset=USER_Z_INDEX,
            )
            self.circle = self.surface.add_circle(point, position.accuracy)
        self.enabled = True

    def apply_orientation(self, sample: OrientationSample) -> None:
        self.heading = sample.heading
        if self.marker is not None:
            self.surface.set_marker_icon(self.marker, icons.user_icon(self.heading))

    async def _consume(self, subscription: DeviceSubscription, handler) -> None:
        async for sample in subscription:
            try:
                handler(sample)
            except Exception:
                logger.exception("Failed to apply %s sample", subscription.name)


__all__ = ["DeviceSubscription", "UserLocationOverlay"]
