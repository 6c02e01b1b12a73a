"""Tracker state machine: search text, radius, loading/error flags, view toggle.

State changes go through ``reduce`` so every transition is a pure function of
the previous state and an action. ``TrackerController`` runs the side effects
(location resolution, flight fetch) and dispatches the resulting actions.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Protocol, Union

from flightmap.config import settings
from flightmap.ingestors import (
    FlightDataUnavailable,
    FlightFetcher,
    LocationResolver,
    NoAircraftDetected,
)
from flightmap.models.flight import Flight
from flightmap.models.location import Location
from flightmap.models.tracker import TrackerState, validate_radius

logger = logging.getLogger("flightmap.services.tracker")

GENERIC_ERROR_MESSAGE = "An error occurred while fetching flight data."


def not_found_message(query: str) -> str:
    return (
        f'Location "{query}" not found. Try an airport code (e.g. JFK, LHR) '
        "or a city name (e.g. London, Mumbai)."
    )


def no_aircraft_message(name: str) -> str:
    return (
        f"No flights currently detected over {name}. "
        "This could mean there are no aircraft in the area right now."
    )


@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class RadiusChanged:
    radius: float


@dataclass(frozen=True)
class SearchStarted:
    pass


@dataclass(frozen=True)
class LocationResolved:
    location: Location


@dataclass(frozen=True)
class SearchSucceeded:
    flights: tuple[Flight, ...]


@dataclass(frozen=True)
class SearchFailed:
    message: str
    clear_flights: bool = False


@dataclass(frozen=True)
class SearchFinished:
    pass


@dataclass(frozen=True)
class ViewToggled:
    pass


Action = Union[
    QueryChanged,
    RadiusChanged,
    SearchStarted,
    LocationResolved,
    SearchSucceeded,
    SearchFailed,
    SearchFinished,
    ViewToggled,
]


def reduce(state: TrackerState, action: Action) -> TrackerState:
    """Return the state that follows ``state`` after ``action``."""

    if isinstance(action, QueryChanged):
        return state.model_copy(update={"query": action.query})
    if isinstance(action, RadiusChanged):
        return state.model_copy(update={"radius": validate_radius(action.radius)})
    if isinstance(action, SearchStarted):
        return state.model_copy(
            update={
                "loading": True,
                "error": "",
                "search_count": state.search_count + 1,
            }
        )
    if isinstance(action, LocationResolved):
        return state.model_copy(update={"searched_location": action.location})
    if isinstance(action, SearchSucceeded):
        return state.model_copy(update={"flights": list(action.flights), "error": ""})
    if isinstance(action, SearchFailed):
        update: dict = {"error": action.message}
        if action.clear_flights:
            update["flights"] = []
        return state.model_copy(update=update)
    if isinstance(action, SearchFinished):
        return state.model_copy(update={"loading": False})
    if isinstance(action, ViewToggled):
        return state.model_copy(update={"show_map": not state.show_map})
    raise ValueError(f"Unsupported tracker action: {action!r}")


class Resolver(Protocol):
    async def resolve(self, query: str) -> Optional[Location]:
        ...


class Fetcher(Protocol):
    async def fetch_flights(self, lat: float, lon: float, radius: float) -> list[Flight]:
        ...


class TrackerController:
    """Holds one session's ``TrackerState`` and runs user actions against it.

    Overlapping searches are not sequenced: whichever fetch resolves last
    writes the flight list.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        fetcher: Optional[Fetcher] = None,
        state: Optional[TrackerState] = None,
    ) -> None:
        self.resolver = resolver or LocationResolver()
        self.fetcher = fetcher or FlightFetcher()
        self.state = state or TrackerState(radius=validate_radius(settings.default_radius))

    def dispatch(self, action: Action) -> TrackerState:
        self.state = reduce(self.state, action)
        return self.state

    def toggle_view(self) -> TrackerState:
        return self.dispatch(ViewToggled())

    async def submit(
        self, query: Optional[str] = None, radius: Optional[float] = None
    ) -> TrackerState:
        """Resolve ``query`` and load flights around it.

        Every failure ends up in ``state.error``; nothing is raised.
        """

        if radius is not None:
            try:
                self.dispatch(RadiusChanged(radius))
            except ValueError as exc:
                logger.info("Rejected search radius %r", radius)
                return self.dispatch(SearchFailed(str(exc)))
        if query is not None:
            self.dispatch(QueryChanged(query))

        text = self.state.query.strip()
        if not text:
            return self.state

        self.dispatch(SearchStarted())
        try:
            location = await self.resolver.resolve(text)
            if location is None:
                logger.info("Search for %r did not resolve", text)
                self.dispatch(SearchFailed(not_found_message(text)))
            else:
                self.dispatch(LocationResolved(location))
                await self._load_flights(location)
        except Exception as exc:
            self._fail_unexpected(exc)
        finally:
            self.dispatch(SearchFinished())
        return self.state

    async def refresh(self) -> TrackerState:
        """Fetch flights again for the current search center."""

        location = self.state.searched_location
        if location is None:
            return self.state

        self.dispatch(SearchStarted())
        try:
            await self._load_flights(location)
        except Exception as exc:
            self._fail_unexpected(exc)
        finally:
            self.dispatch(SearchFinished())
        return self.state

    async def _load_flights(self, location: Location) -> None:
        try:
            flights = await self.fetcher.fetch_flights(
                location.latitude, location.longitude, self.state.radius
            )
        except FlightDataUnavailable as exc:
            self.dispatch(SearchFailed(str(exc)))
            return
        except NoAircraftDetected:
            logger.info("No aircraft reported around %s", location.name)
            self.dispatch(
                SearchFailed(no_aircraft_message(location.name), clear_flights=True)
            )
            return

        logger.info("Loaded %s airborne flights around %s", len(flights), location.name)
        self.dispatch(SearchSucceeded(tuple(flights)))

    def _fail_unexpected(self, exc: Exception) -> None:
        logger.exception("Flight search failed")
        self.dispatch(SearchFailed(str(exc) or GENERIC_ERROR_MESSAGE))


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "LocationResolved",
    "QueryChanged",
    "RadiusChanged",
    "SearchFailed",
    "SearchFinished",
    "SearchStarted",
    "SearchSucceeded",
    "TrackerController",
    "ViewToggled",
    "no_aircraft_message",
    "not_found_message",
    "reduce",
]
