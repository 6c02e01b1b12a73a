"""Location models: resolved search centers and device-sourced positions."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    """A resolved search result used as the current search center."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    name: str = Field(..., description="Most specific segment of the place name")
    query: str = Field(..., description="Query text as entered by the user")


class UserPosition(BaseModel):
    """A single fix from the device position stream."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float = Field(
        default=0.0, ge=0, description="Accuracy radius in meters"
    )


class OrientationSample(BaseModel):
    """A single event from the device orientation stream.

    Some platforms expose a vendor compass heading directly; others only
    provide the standard ``alpha`` angle, which runs counter-clockwise.
    """

    webkit_compass_heading: Optional[float] = Field(
        default=None, description="Vendor compass heading in degrees from north"
    )
    alpha: Optional[float] = Field(
        default=None, description="Standard orientation-event alpha angle"
    )

    @property
    def heading(self) -> float:
        if self.webkit_compass_heading is not None:
            return self.webkit_compass_heading
        if self.alpha is not None:
            return 360 - self.alpha
        return 0.0


class DeviceCapabilities(BaseModel):
    """What the browser reported it can stream."""

    geolocation: bool = Field(default=False)
    orientation: bool = Field(default=False)
    orientation_permission: Optional[Literal["granted", "denied", "prompt"]] = Field(
        default=None,
        description="Result of the orientation permission handshake, when required",
    )

    @property
    def orientation_usable(self) -> bool:
        if not self.orientation:
            return False
        return self.orientation_permission in (None, "granted")


__all__ = ["DeviceCapabilities", "Location", "OrientationSample", "UserPosition"]
