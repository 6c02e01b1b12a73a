from flightmap.models.flight import Flight
from flightmap.services.map_reconciler import FlightMapReconciler
from flightmap.services.map_surface import RetainedMapSurface


def _flight(flight_id, lat, lon, heading=0.0, callsign="TEST1"):
    return Flight(
        id=flight_id,
        callsign=callsign,
        country="India",
        latitude=lat,
        longitude=lon,
        altitude="3000 m",
        velocity="720 km/h",
        heading=f"{round(heading)}°",
        heading_deg=heading,
    )


def _reconciler():
    surface = RetainedMapSurface((12.97, 77.59))
    return surface, FlightMapReconciler(surface)


def test_new_flights_get_marker_popup_and_single_point_track():
    surface, reconciler = _reconciler()

    result = reconciler.reconcile([_flight("a", 13.0, 77.5, heading=45, callsign="AIC101")])

    assert result.created == ["a"]
    tracked = reconciler.get("a")
    assert tracked.track == [(13.0, 77.5)]
    assert tracked.polyline is None
    marker = surface.markers[tracked.marker]
    assert (marker.latitude, marker.longitude) == (13.0, 77.5)
    assert "rotate(45)" in marker.icon_html
    assert "AIC101" in marker.popup_html
    assert "Country: India" in marker.popup_html
    assert surface.polylines == {}


def test_moving_flight_extends_track_and_creates_path():
    surface, reconciler = _reconciler()
    reconciler.reconcile([_flight("a", 13.0, 77.5)])

    result = reconciler.reconcile([_flight("a", 13.1, 77.6, heading=90)])

    assert result.updated == ["a"]
    tracked = reconciler.get("a")
    assert tracked.track == [(13.0, 77.5), (13.1, 77.6)]
    assert tracked.polyline is not None
    assert surface.polylines[tracked.polyline].points == [(13.0, 77.5), (13.1, 77.6)]
    marker = surface.markers[tracked.marker]
    assert (marker.latitude, marker.longitude) == (13.1, 77.6)
    assert "rotate(90)" in marker.icon_html

    reconciler.reconcile([_flight("a", 13.2, 77.7)])

    assert len(surface.polylines) == 1
    assert surface.polylines[tracked.polyline].points[-1] == (13.2, 77.7)


def test_repeated_identical_position_is_not_appended():
    surface, reconciler = _reconciler()

    for _ in range(3):
        reconciler.reconcile([_flight("a", 13.0, 77.5)])

    assert reconciler.track("a") == [(13.0, 77.5)]
    assert reconciler.get("a").polyline is None
    assert surface.polylines == {}


def test_track_length_never_decreases_for_present_flights():
    _, reconciler = _reconciler()
    positions = [(13.0, 77.5), (13.0, 77.5), (13.1, 77.5), (13.1, 77.5), (13.2, 77.4)]

    lengths = []
    for lat, lon in positions:
        reconciler.reconcile([_flight("a", lat, lon)])
        lengths.append(len(reconciler.track("a")))

    assert lengths == [1, 1, 2, 2, 3]


def test_absent_flights_are_evicted_with_their_paths():
    surface, reconciler = _reconciler()
    reconciler.reconcile([_flight("a", 13.0, 77.5), _flight("b", 12.0, 77.0)])
    reconciler.reconcile([_flight("a", 13.1, 77.5), _flight("b", 12.1, 77.0)])
    assert len(surface.polylines) == 2

    result = reconciler.reconcile([_flight("b", 12.2, 77.0), _flight("c", 11.0, 76.0)])

    assert result.evicted == ["a"]
    assert result.created == ["c"]
    assert reconciler.tracked_ids() == {"b", "c"}
    assert len(surface.markers) == 2
    assert len(surface.polylines) == 1


def test_empty_cycle_clears_the_map():
    surface, reconciler = _reconciler()
    reconciler.reconcile([_flight("a", 13.0, 77.5), _flight("b", 12.0, 77.0)])

    result = reconciler.reconcile([])

    assert sorted(result.evicted) == ["a", "b"]
    assert len(reconciler) == 0
    assert surface.markers == {}
    assert surface.polylines == {}


def test_flights_without_position_are_treated_as_absent():
    surface, reconciler = _reconciler()
    reconciler.reconcile([_flight("a", 13.0, 77.5)])

    result = reconciler.reconcile([Flight(id="a"), Flight(id="b")])

    assert result.evicted == ["a"]
    assert result.created == []
    assert surface.markers == {}


def test_clear_removes_everything_it_drew():
    surface, reconciler = _reconciler()
    reconciler.reconcile([_flight("a", 13.0, 77.5)])
    reconciler.reconcile([_flight("a", 13.1, 77.5)])

    reconciler.clear()

    assert len(reconciler) == 0
    assert surface.markers == {}
    assert surface.polylines == {}
