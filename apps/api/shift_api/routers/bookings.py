"""Concierge review of submitted booking requests."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import bookings as schemas
from ..services import bookings as bookings_service

router = APIRouter()


@router.post("/{request_id}/approve", response_model=schemas.ReviewResponse)
async def approve(
    request_id: str,
    payload: schemas.ReviewRequest | None = None,
    session: AsyncSession = Depends(get_session),
) -> schemas.ReviewResponse:
    """Approve a request and block its dates on each listing."""

    return await bookings_service.approve_booking_request(request_id, payload or schemas.ReviewRequest(), session)


@router.post("/{request_id}/deny", response_model=schemas.ReviewResponse)
async def deny(
    request_id: str,
    payload: schemas.ReviewRequest | None = None,
    session: AsyncSession = Depends(get_session),
) -> schemas.ReviewResponse:
    return await bookings_service.deny_booking_request(request_id, payload or schemas.ReviewRequest(), session)
