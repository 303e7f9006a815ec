"""Listing lookup for the browse screens."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.listing import ListingKind
from ..repositories import listings as listings_repo
from ..schemas import listings as schemas


async def search_listings(
    session: AsyncSession,
    *,
    location: str | None,
    kind: ListingKind | None,
    limit: int,
) -> schemas.ListingSearchResponse:
    """Return listing references ready to be handed to the trip setters."""

    rows = await listings_repo.search_listings(session, location=location, kind=kind, limit=limit)
    return schemas.ListingSearchResponse(
        results=[
            schemas.ListingCard(
                id=row.id,
                kind=row.kind,
                title=row.title,
                location=row.location,
                price=row.price,
                price_unit=row.price_unit,
                read_only_calendar=row.read_only_calendar,
                sync_status=row.sync_status,
                last_synced_at=row.last_synced_at,
            )
            for row in rows
        ]
    )
