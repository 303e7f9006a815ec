"""Schemas for listing lookup."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..models.listing import ListingKind


class ListingCard(BaseModel):
    id: str
    kind: ListingKind
    title: str
    location: str
    price: int
    price_unit: str
    read_only_calendar: bool = False
    sync_status: str = "n/a"
    last_synced_at: datetime | None = None


class ListingSearchResponse(BaseModel):
    results: list[ListingCard] = Field(default_factory=list)
