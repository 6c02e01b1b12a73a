"""Stateless lookups: resolve a location, list flights around a point."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from flightmap.ingestors import (
    FlightDataUnavailable,
    FlightFetcher,
    LocationResolver,
    NoAircraftDetected,
    build_bounding_box,
)
from flightmap.models import ALLOWED_RADII, FlightSearchResponse, Location, validate_radius
from flightmap.services.tracker import no_aircraft_message, not_found_message

router = APIRouter(prefix="/api/v1", tags=["flights"])

logger = logging.getLogger("flightmap.api.flights")


def get_location_resolver() -> LocationResolver:
    return LocationResolver()


def get_flight_fetcher() -> FlightFetcher:
    return FlightFetcher()


@router.get(
    "/locations/resolve",
    response_model=Location,
    summary="Resolve an airport code or city name",
)
async def resolve_location(
    q: str = Query(..., min_length=1, description="Airport code or city name"),
    resolver: LocationResolver = Depends(get_location_resolver),
) -> Location:
    location = await resolver.resolve(q)
    if location is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=not_found_message(q)
        )
    return location


@router.get(
    "/flights",
    response_model=FlightSearchResponse,
    summary="Airborne flights inside a box around a point",
)
async def list_flights(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: float = Query(
        default=0.5,
        description=f"Box half-size in degrees; one of {list(ALLOWED_RADII)}",
    ),
    fetcher: FlightFetcher = Depends(get_flight_fetcher),
) -> FlightSearchResponse:
    try:
        radius = validate_radius(radius)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    box = build_bounding_box(lat, lon, radius)
    try:
        flights = await fetcher.fetch_flights(lat, lon, radius)
    except FlightDataUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except NoAircraftDetected:
        return FlightSearchResponse(
            bounding_box=box,
            flights=[],
            message=no_aircraft_message(f"{lat:.4f}, {lon:.4f}"),
        )

    logger.info("Listed %s flights around %.4f, %.4f", len(flights), lat, lon)
    return FlightSearchResponse(bounding_box=box, flights=flights)
