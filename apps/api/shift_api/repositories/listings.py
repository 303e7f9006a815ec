"""Data access helpers for rentable listings."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.listing import PRICE_UNITS, Listing, ListingKind


@dataclass(slots=True)
class ListingRow:
    """Flattened listing details used by the service layer."""

    id: str
    kind: ListingKind
    title: str
    location: str
    price: int
    price_unit: str
    read_only_calendar: bool
    sync_status: str
    last_synced_at: datetime | None


async def search_listings(
    session: AsyncSession,
    *,
    location: str | None = None,
    kind: ListingKind | None = None,
    limit: int = 50,
) -> list[ListingRow]:
    """Return active listings filtered by location substring and kind, cheapest first."""

    stmt = select(Listing).where(Listing.active.is_(True))
    if location:
        stmt = stmt.where(func.lower(Listing.location).like(f"%{location.lower()}%"))
    if kind is not None:
        stmt = stmt.where(Listing.kind == kind)
    stmt = stmt.order_by(Listing.price.asc(), Listing.id.asc()).limit(limit)

    rows: Sequence[Listing] = (await session.execute(stmt)).scalars().all()
    return [_to_row(listing) for listing in rows]


async def get_listing(session: AsyncSession, listing_id: str) -> ListingRow | None:
    """Fetch a single listing by identifier."""

    listing = await session.get(Listing, listing_id)
    if listing is None:
        return None
    return _to_row(listing)


def _to_row(listing: Listing) -> ListingRow:
    return ListingRow(
        id=listing.id,
        kind=listing.kind,
        title=listing.title,
        location=listing.location,
        price=listing.price,
        price_unit=PRICE_UNITS[listing.kind],
        read_only_calendar=listing.calendar_read_only,
        sync_status=listing.sync_status.value,
        last_synced_at=listing.last_synced_at,
    )
