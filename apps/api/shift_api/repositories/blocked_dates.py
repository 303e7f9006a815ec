"""Blocked date persistence and the SQL-backed availability gateway."""
from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.blocked_date import BlockedDate


async def list_blocked_dates(session: AsyncSession, *, listing_id: str) -> list[str]:
    """Return the listing's blocked days as sorted ISO keys."""

    stmt = select(BlockedDate.day).where(BlockedDate.listing_id == listing_id).order_by(BlockedDate.day.asc())
    result = await session.execute(stmt)
    return [day.isoformat() for day in result.scalars().all()]


async def add_blocked_dates(session: AsyncSession, *, listing_id: str, days: Iterable[date]) -> int:
    """Insert the days not already blocked; return how many rows were added."""

    wanted = set(days)
    if not wanted:
        return 0

    stmt = select(BlockedDate.day).where(BlockedDate.listing_id == listing_id, BlockedDate.day.in_(wanted))
    existing = set((await session.execute(stmt)).scalars().all())

    missing = sorted(wanted - existing)
    for day in missing:
        session.add(BlockedDate(listing_id=listing_id, day=day))
    await session.flush()
    return len(missing)


async def remove_blocked_dates(session: AsyncSession, *, listing_id: str, days: Iterable[date]) -> None:
    """Delete the given days; days that are not blocked are ignored."""

    wanted = set(days)
    if not wanted:
        return
    await session.execute(
        delete(BlockedDate).where(BlockedDate.listing_id == listing_id, BlockedDate.day.in_(wanted))
    )


class SqlAvailabilityGateway:
    """Availability gateway writing blocked dates through an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def block_dates(self, listing_id: str, dates: list[str]) -> None:
        async with self._session.begin():
            await add_blocked_dates(self._session, listing_id=listing_id, days=_parse(dates))

    async def unblock_dates(self, listing_id: str, dates: list[str]) -> None:
        async with self._session.begin():
            await remove_blocked_dates(self._session, listing_id=listing_id, days=_parse(dates))


def _parse(dates: Iterable[str]) -> list[date]:
    return [date.fromisoformat(value) for value in dates]
