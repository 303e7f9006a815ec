"""Trip submission and concierge review of booking requests."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.booking_request import BookingRequestStatus
from ..repositories import blocked_dates as blocked_dates_repo
from ..repositories import booking_requests as booking_requests_repo
from ..repositories import listings as listings_repo
from ..schemas import bookings as booking_schemas
from ..schemas import trips as trip_schemas
from . import trip as composer
from .session_store import trip_store

logger = logging.getLogger(__name__)


async def submit_trip(
    session_id: str,
    payload: trip_schemas.SubmitTripRequest,
    session: AsyncSession,
) -> trip_schemas.SubmitTripResponse:
    """Persist the composed trip as a pending request and start a fresh trip.

    The quote is taken from the trip as it stands at submission time.
    """

    state = trip_store.get(session_id)
    quote = composer.build_quote(state) if state is not None else None
    if quote is None or not quote.lines:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Trip has nothing to book")
    undated = [line.leg for line in quote.lines if not _has_required_dates(line)]
    if undated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please select valid dates for: {', '.join(undated)}",
        )

    lines = [
        trip_schemas.QuoteLineOut(
            leg=line.leg,
            listing_id=line.listing_id,
            title=line.title,
            start=line.start,
            end=line.end,
            units=line.units,
            unit_price=line.unit_price,
            total=line.total,
        )
        for line in quote.lines
    ]

    guest = payload.guest
    async with session.begin():
        request_id = await booking_requests_repo.create_booking_request(
            session,
            session_id=session_id,
            guest_name=guest.name,
            guest_email=str(guest.email),
            guest_phone=guest.phone,
            guests=guest.guests,
            guest_notes=guest.notes,
            location=quote.location,
            legs=[line.model_dump(mode="json") for line in lines],
            trip_total=quote.trip_total,
        )

    trip_store.save(session_id, composer.clear_trip())
    logger.info("Booking request %s submitted for session %s (total %d)", request_id, session_id, quote.trip_total)

    return trip_schemas.SubmitTripResponse(
        booking_request_id=request_id,
        status=BookingRequestStatus.PENDING.value,
        lines=lines,
        trip_total=quote.trip_total,
    )


async def approve_booking_request(
    request_id: str,
    payload: booking_schemas.ReviewRequest,
    session: AsyncSession,
) -> booking_schemas.ReviewResponse:
    """Approve a pending request and block each leg's dates on its listing."""

    blocked: dict[str, list[str]] = {}
    skipped: list[str] = []
    async with session.begin():
        request = await _require_pending(session, request_id)

        for leg in request.legs_json or []:
            days = _leg_days(leg)
            if not days:
                continue
            listing_id = leg["listing_id"]
            listing = await listings_repo.get_listing(session, listing_id)
            if listing is None or listing.read_only_calendar:
                logger.info("Not blocking dates on listing %s; missing or read-only calendar", listing_id)
                skipped.append(listing_id)
                continue
            await blocked_dates_repo.add_blocked_dates(session, listing_id=listing_id, days=days)
            blocked.setdefault(listing_id, []).extend(day.isoformat() for day in days)

        request.status = BookingRequestStatus.APPROVED
        request.admin_notes = payload.admin_notes
        request.reviewed_at = datetime.now(timezone.utc)
        session.add(request)

    logger.info("Booking request %s approved; blocked dates on %d listing(s)", request_id, len(blocked))
    return booking_schemas.ReviewResponse(
        booking_request_id=request_id,
        status=BookingRequestStatus.APPROVED.value,
        blocked={listing_id: sorted(set(days)) for listing_id, days in blocked.items()},
        skipped=sorted(set(skipped)),
    )


async def deny_booking_request(
    request_id: str,
    payload: booking_schemas.ReviewRequest,
    session: AsyncSession,
) -> booking_schemas.ReviewResponse:
    """Deny a pending request without touching availability."""

    async with session.begin():
        request = await _require_pending(session, request_id)
        request.status = BookingRequestStatus.DENIED
        request.admin_notes = payload.admin_notes
        request.reviewed_at = datetime.now(timezone.utc)
        session.add(request)

    return booking_schemas.ReviewResponse(booking_request_id=request_id, status=BookingRequestStatus.DENIED.value)


async def _require_pending(session: AsyncSession, request_id: str):
    request = await booking_requests_repo.get_by_id(session, request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking request not found")
    if request.status != BookingRequestStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Booking request already reviewed")
    return request


def _has_required_dates(line: composer.QuoteLine) -> bool:
    """Charters need a start day; stays and rentals need both ends."""

    if line.leg == "vessel":
        return line.start is not None
    return line.start is not None and line.end is not None


def _leg_days(leg: dict) -> list[date]:
    """Every day of a leg's inclusive range; single-day legs give one day."""

    start_raw = leg.get("start")
    if not start_raw:
        return []
    start = date.fromisoformat(start_raw)
    end = date.fromisoformat(leg["end"]) if leg.get("end") else start
    if end < start:
        return [start]
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
