#!/usr/bin/env python
"""
Run this to exercise the live geocoding and flight-state providers.

Usage (from repo root):
    python scripts/run_live_search.py JFK 0.5
"""

import asyncio
import sys

from flightmap.services import TrackerController, render_flight_cards


async def main(query: str, radius: float) -> None:
    controller = TrackerController()

    print(f"=== Live flight search for {query!r} (radius {radius}) ===\n")
    state = await controller.submit(query, radius)

    if state.searched_location:
        loc = state.searched_location
        print(f"Resolved to {loc.name} at {loc.latitude:.4f}, {loc.longitude:.4f}")

    if state.error:
        print(f"\n{state.error}")
        return

    listing = render_flight_cards(state.flights)
    print(f"\n{listing.heading}. Showing a few:")
    for idx, card in enumerate(listing.cards[:5], start=1):
        fields = ", ".join(f"{f.label}={f.value}" for f in card.fields)
        print(f"{idx}. {card.title} ({card.badge}) {fields}")


if __name__ == "__main__":
    query = sys.argv[1] if len(sys.argv) > 1 else "JFK"
    radius = float(sys.argv[2]) if len(sys.argv) > 2 else 0.5
    asyncio.run(main(query, radius))
