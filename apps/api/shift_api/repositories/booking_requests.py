"""Booking request persistence helpers."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.booking_request import BookingRequest, BookingRequestStatus


async def create_booking_request(
    session: AsyncSession,
    *,
    session_id: str | None,
    guest_name: str,
    guest_email: str,
    guest_phone: str | None,
    guests: int | None,
    guest_notes: str | None,
    location: str,
    legs: list[dict],
    trip_total: int,
) -> str:
    """Persist a pending booking request and return its identifier."""

    request = BookingRequest(
        id=str(uuid4()),
        session_id=session_id,
        guest_name=guest_name,
        guest_email=guest_email,
        guest_phone=guest_phone,
        guests=guests,
        guest_notes=guest_notes,
        location=location,
        legs_json=legs,
        trip_total=trip_total,
        status=BookingRequestStatus.PENDING,
    )
    session.add(request)
    await session.flush()
    return request.id


async def get_by_id(session: AsyncSession, request_id: str) -> BookingRequest | None:
    """Return a booking request by identifier."""

    return await session.get(BookingRequest, request_id)
