import asyncio

import pytest

from flightmap.config import settings
from flightmap.models.location import DeviceCapabilities, OrientationSample, UserPosition
from flightmap.services.map_surface import RetainedMapSurface
from flightmap.services.user_location import DeviceSubscription, UserLocationOverlay


async def _settle(condition, attempts: int = 50):
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


def _overlay():
    surface = RetainedMapSurface((12.97, 77.59))
    return surface, UserLocationOverlay(surface)


def test_orientation_heading_prefers_vendor_compass():
    assert OrientationSample(webkit_compass_heading=30, alpha=100).heading == 30
    assert OrientationSample(alpha=100).heading == 260
    assert OrientationSample().heading == 0


def test_first_fix_creates_marker_and_accuracy_circle():
    surface, overlay = _overlay()

    overlay.apply_position(UserPosition(latitude=12.9, longitude=77.6, accuracy=25))

    assert overlay.enabled is True
    marker = surface.markers[overlay.marker]
    assert (marker.latitude, marker.longitude) == (12.9, 77.6)
    assert marker.z_index_offset == 2000
    assert "Your Location" in marker.popup_html
    assert "±25m" in marker.popup_html
    assert surface.circles[overlay.circle].radius == 25


def test_later_fixes_move_marker_and_circle():
    surface, overlay = _overlay()
    overlay.apply_position(UserPosition(latitude=12.9, longitude=77.6, accuracy=25))
    overlay.apply_orientation(OrientationSample(alpha=270))

    overlay.apply_position(UserPosition(latitude=13.0, longitude=77.7, accuracy=10))

    assert len(surface.markers) == 1
    assert len(surface.circles) == 1
    marker = surface.markers[overlay.marker]
    circle = surface.circles[overlay.circle]
    assert (marker.latitude, marker.longitude) == (13.0, 77.7)
    assert (circle.latitude, circle.longitude, circle.radius) == (13.0, 77.7, 10)
    assert "rotate(90)" in marker.icon_html


def test_orientation_before_any_fix_only_records_heading():
    surface, overlay = _overlay()

    overlay.apply_orientation(OrientationSample(webkit_compass_heading=120))

    assert overlay.heading == 120
    assert surface.markers == {}


def test_missing_geolocation_is_a_silent_no_op():
    surface, overlay = _overlay()

    started = overlay.start_tracking(DeviceCapabilities(geolocation=False, orientation=True))

    assert started is False
    assert overlay.tracking is False
    assert overlay.publish_position(UserPosition(latitude=1, longitude=2)) is False
    assert surface.markers == {}


def test_subscription_drops_samples_faster_than_its_interval():
    ticks = iter([0.0, 0.05, 0.5])
    subscription = DeviceSubscription("position", min_interval=0.2, clock=lambda: next(ticks))

    assert subscription.publish("a") is True
    assert subscription.publish("b") is False
    assert subscription.publish("c") is True

    subscription.unsubscribe()
    assert subscription.publish("d") is False


@pytest.mark.anyio
async def test_subscription_iteration_ends_on_unsubscribe():
    subscription = DeviceSubscription("position", min_interval=0)
    subscription.publish(1)
    subscription.publish(2)

    received = []

    async def consume():
        async for sample in subscription:
            received.append(sample)

    task = asyncio.create_task(consume())
    await _settle(lambda: len(received) == 2)
    subscription.unsubscribe()
    await asyncio.wait_for(task, timeout=1)

    assert received == [1, 2]


@pytest.mark.anyio
async def test_streams_drive_overlay_until_stopped(monkeypatch):
    monkeypatch.setattr(settings, "device_stream_min_interval", 0.0)
    surface, overlay = _overlay()

    assert overlay.start_tracking(DeviceCapabilities(geolocation=True, orientation=True))
    overlay.publish_position(UserPosition(latitude=12.9, longitude=77.6, accuracy=15))
    await _settle(lambda: overlay.marker is not None)

    overlay.publish_orientation(OrientationSample(webkit_compass_heading=45))
    await _settle(lambda: overlay.heading == 45)
    assert "rotate(45)" in surface.markers[overlay.marker].icon_html

    await overlay.stop_tracking()

    assert overlay.enabled is False
    assert overlay.tracking is False
    assert overlay.marker is None and overlay.circle is None
    assert surface.markers == {} and surface.circles == {}
    assert overlay.publish_position(UserPosition(latitude=1, longitude=2)) is False


@pytest.mark.anyio
async def test_denied_orientation_permission_keeps_position_stream(monkeypatch):
    monkeypatch.setattr(settings, "device_stream_min_interval", 0.0)
    _, overlay = _overlay()

    overlay.start_tracking(
        DeviceCapabilities(geolocation=True, orientation=True, orientation_permission="denied")
    )

    assert overlay.tracking is True
    assert overlay.orientations is None
    assert overlay.publish_orientation(OrientationSample(alpha=10)) is False

    await overlay.stop_tracking()


@pytest.mark.anyio
async def test_restart_adds_compass_once_permission_is_granted(monkeypatch):
    monkeypatch.setattr(settings, "device_stream_min_interval", 0.0)
    surface, overlay = _overlay()

    overlay.start_tracking(
        DeviceCapabilities(geolocation=True, orientation=True, orientation_permission="prompt")
    )
    positions = overlay.positions
    assert overlay.orientations is None

    assert overlay.start_tracking(
        DeviceCapabilities(geolocation=True, orientation=True, orientation_permission="granted")
    )

    assert overlay.positions is positions
    assert overlay.orientations is not None
    overlay.publish_position(UserPosition(latitude=12.9, longitude=77.6))
    await _settle(lambda: overlay.marker is not None)
    overlay.publish_orientation(OrientationSample(webkit_compass_heading=90))
    await _settle(lambda: overlay.heading == 90)

    await overlay.stop_tracking()
    assert surface.markers == {}
