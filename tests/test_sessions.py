import pytest

from flightmap.models.location import Location
from flightmap.services.sessions import SessionRegistry
from flightmap.services.tracker import TrackerController


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class NoopResolver:
    async def resolve(self, query: str):
        return Location(latitude=0.0, longitude=0.0, name=query, query=query)


class NoopFetcher:
    async def fetch_flights(self, lat: float, lon: float, radius: float):
        return []


def _registry(clock, idle_timeout=60.0):
    return SessionRegistry(
        controller_factory=lambda: TrackerController(
            resolver=NoopResolver(), fetcher=NoopFetcher()
        ),
        idle_timeout=idle_timeout,
        clock=clock,
    )


@pytest.mark.anyio
async def test_creating_a_session_closes_idle_ones():
    clock = FakeClock()
    registry = _registry(clock)
    idle = await registry.create()
    await idle.toggle_view()
    assert idle.map_view is not None

    clock.now += 61
    fresh = await registry.create()

    assert len(registry) == 1
    assert registry.get(fresh.id) is fresh
    assert idle.map_view is None
    with pytest.raises(KeyError):
        registry.get(idle.id)


@pytest.mark.anyio
async def test_lookups_keep_a_session_alive():
    clock = FakeClock()
    registry = _registry(clock)
    session = await registry.create()

    clock.now += 45
    registry.get(session.id)
    clock.now += 45
    await registry.create()

    assert len(registry) == 2
    assert registry.get(session.id) is session


@pytest.mark.anyio
async def test_zero_timeout_disables_pruning():
    clock = FakeClock()
    registry = _registry(clock, idle_timeout=0)
    await registry.create()

    clock.now += 10_000

    assert await registry.prune_idle() == 0
    assert len(registry) == 1
