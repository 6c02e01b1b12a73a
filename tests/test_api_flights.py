import pytest
from fastapi.testclient import TestClient

from flightmap.api.flights import get_flight_fetcher, get_location_resolver
from flightmap.ingestors import FlightDataUnavailable, NoAircraftDetected
from flightmap.main import app
from flightmap.models.flight import Flight
from flightmap.models.location import Location


class FakeResolver:
    def __init__(self, location=None):
        self.location = location

    async def resolve(self, query: str):
        return self.location


class FakeFetcher:
    def __init__(self, flights=None, fail=None):
        self.flights = flights or []
        self.fail = fail

    async def fetch_flights(self, lat, lon, radius):
        if self.fail:
            raise self.fail
        return self.flights


@pytest.fixture
def client():
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        test_client.close()
        app.dependency_overrides.clear()


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_resolve_location(client):
    location = Location(latitude=51.47, longitude=-0.45, name="Heathrow Airport", query="LHR")
    app.dependency_overrides[get_location_resolver] = lambda: FakeResolver(location)

    response = client.get("/api/v1/locations/resolve", params={"q": "LHR"})

    assert response.status_code == 200
    assert response.json()["name"] == "Heathrow Airport"


def test_resolve_location_not_found(client):
    app.dependency_overrides[get_location_resolver] = lambda: FakeResolver(None)

    response = client.get("/api/v1/locations/resolve", params={"q": "Atlantis"})

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_list_flights_returns_box_and_flights(client):
    app.dependency_overrides[get_flight_fetcher] = lambda: FakeFetcher(
        flights=[Flight(id="a", latitude=40.7, longitude=-73.9)]
    )

    response = client.get(
        "/api/v1/flights", params={"lat": 40.64, "lon": -73.78, "radius": 0.5}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["bounding_box"]["lat_min"] == pytest.approx(40.14)
    assert body["bounding_box"]["lon_max"] == pytest.approx(-73.28)
    assert [f["id"] for f in body["flights"]] == ["a"]
    assert body["message"] is None


def test_list_flights_no_traffic_is_informational(client):
    app.dependency_overrides[get_flight_fetcher] = lambda: FakeFetcher(
        fail=NoAircraftDetected("empty")
    )

    response = client.get("/api/v1/flights", params={"lat": 0, "lon": 0})

    assert response.status_code == 200
    assert response.json()["flights"] == []
    assert response.json()["message"].startswith("No flights currently detected")


def test_list_flights_provider_failure_is_503(client):
    app.dependency_overrides[get_flight_fetcher] = lambda: FakeFetcher(
        fail=FlightDataUnavailable(429)
    )

    response = client.get("/api/v1/flights", params={"lat": 0, "lon": 0})

    assert response.status_code == 503
    assert "rate-limited" in response.json()["detail"]


def test_list_flights_rejects_bad_radius(client):
    app.dependency_overrides[get_flight_fetcher] = lambda: FakeFetcher()

    response = client.get("/api/v1/flights", params={"lat": 0, "lon": 0, "radius": 2})

    assert response.status_code == 422
