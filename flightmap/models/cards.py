"""Card models for the list view."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CardField(BaseModel):
    label: str
    value: str


class FlightCard(BaseModel):
    """One aircraft in the list view."""

    id: str
    title: str = Field(..., description="Callsign")
    badge: str = Field(..., description="Origin country")
    fields: list[CardField] = Field(default_factory=list)


class FlightList(BaseModel):
    heading: str
    cards: list[FlightCard] = Field(default_factory=list)


__all__ = ["CardField", "FlightCard", "FlightList"]
