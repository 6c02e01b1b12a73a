"""Flight list view."""

from __future__ import annotations

from typing import Iterable

from flightmap.models.cards import CardField, FlightCard, FlightList
from flightmap.models.flight import Flight


def render_flight_card(flight: Flight) -> FlightCard:
    return FlightCard(
        id=flight.id,
        title=flight.callsign,
        badge=flight.country,
        fields=[
            CardField(label="Altitude", value=flight.altitude),
            CardField(label="Speed", value=flight.velocity),
            CardField(label="Heading", value=flight.heading),
            CardField(
                label="Position",
                value=f"{flight.latitude_display}, {flight.longitude_display}",
            ),
        ],
    )


def render_flight_cards(flights: Iterable[Flight]) -> FlightList:
    cards = [render_flight_card(flight) for flight in flights]
    return FlightList(heading=f"{len(cards)} Aircraft Detected", cards=cards)


__all__ = ["render_flight_card", "render_flight_cards"]
