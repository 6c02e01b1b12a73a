"""Location resolution for airport codes and place names using Nominatim."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from flightmap.config import settings
from flightmap.models.location import Location

logger = logging.getLogger("flightmap.ingestors.geocoding")


def _display_name(raw: Any, fallback: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.split(",", 1)[0].strip() or fallback
    return fallback


class LocationResolver:
    """Resolve free text to coordinates, trying an airport match first."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.geocoder_base_url
        self.timeout = timeout or settings.geocoder_timeout
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.transport = transport

    async def resolve(self, query: str) -> Optional[Location]:
        """Return the best match for ``query`` or ``None`` if nothing matched."""

        cleaned = (query or "").strip()
        if not cleaned:
            return None

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={"User-Agent": self.user_agent},
        ) as client:
            for candidate in (f"{cleaned} airport", cleaned):
                location = await self._lookup(client, candidate, cleaned)
                if location is not None:
                    logger.info(
                        "Resolved %r via %r to %s (%.4f, %.4f)",
                        cleaned,
                        candidate,
                        location.name,
                        location.latitude,
                        location.longitude,
                    )
                    return location

        logger.info("No geocoding result for %r", cleaned)
        return None

    async def _lookup(
        self, client: httpx.AsyncClient, text: str, original: str
    ) -> Optional[Location]:
        params = {"format": "json", "q": text, "limit": 1}
        try:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Geocoding request timed out for %r: %s", text, exc)
            return None
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Geocoding provider returned HTTP %s for %r",
                exc.response.status_code,
                text,
            )
            return None
        except httpx.RequestError as exc:
            logger.warning("Geocoding request failed for %r: %s", text, exc)
            return None
        except ValueError as exc:
            logger.warning("Failed to parse geocoding response for %r: %s", text, exc)
            return None

        if not isinstance(payload, list) or not payload:
            return None

        first = payload[0]
        if not isinstance(first, dict):
            return None
        try:
            latitude = float(first["lat"])
            longitude = float(first["lon"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Geocoding result for %r lacks coordinates: %s", text, first)
            return None

        return Location(
            latitude=latitude,
            longitude=longitude,
            name=_display_name(first.get("display_name"), original),
            query=original,
        )


__all__ = ["LocationResolver"]
