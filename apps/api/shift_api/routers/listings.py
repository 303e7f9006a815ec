"""Listing lookup endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..models.listing import ListingKind
from ..schemas import listings as schemas
from ..services import listings as listings_service

router = APIRouter()


@router.get("", response_model=schemas.ListingSearchResponse)
async def search_listings(
    location: str | None = None,
    kind: ListingKind | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingSearchResponse:
    """Return active listings for a city and asset type."""

    return await listings_service.search_listings(session, location=location, kind=kind, limit=limit)
