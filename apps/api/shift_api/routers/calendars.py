"""Availability calendar endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import calendars as schemas
from ..services import calendars as calendars_service

router = APIRouter()


@router.post("/listings/{listing_id}/calendar", response_model=schemas.CalendarResponse)
async def open_calendar(
    listing_id: str,
    payload: schemas.OpenCalendarRequest | None = None,
    session: AsyncSession = Depends(get_session),
) -> schemas.CalendarResponse:
    """Open a listing's calendar in view mode."""

    return await calendars_service.open_listing_calendar(listing_id, payload or schemas.OpenCalendarRequest(), session)


@router.get("/calendars/{calendar_id}", response_model=schemas.CalendarResponse)
async def get_calendar(calendar_id: str) -> schemas.CalendarResponse:
    return calendars_service.get_calendar(calendar_id)


@router.put("/calendars/{calendar_id}/mode", response_model=schemas.CalendarResponse)
async def set_mode(calendar_id: str, payload: schemas.SetModeRequest) -> schemas.CalendarResponse:
    """Switch between view, block and unblock; the selection is dropped."""

    return calendars_service.set_mode(calendar_id, payload)


@router.post("/calendars/{calendar_id}/toggle", response_model=schemas.CalendarResponse)
async def toggle_date(calendar_id: str, payload: schemas.ToggleDateRequest) -> schemas.CalendarResponse:
    """Select or deselect a date; ineligible dates are ignored."""

    return calendars_service.toggle_date(calendar_id, payload)


@router.post("/calendars/{calendar_id}/month", response_model=schemas.CalendarResponse)
async def show_month(calendar_id: str, payload: schemas.ShowMonthRequest) -> schemas.CalendarResponse:
    return calendars_service.show_month(calendar_id, payload)


@router.post("/calendars/{calendar_id}/cancel", response_model=schemas.CalendarResponse)
async def cancel(calendar_id: str) -> schemas.CalendarResponse:
    return calendars_service.cancel(calendar_id)


@router.post("/calendars/{calendar_id}/apply", response_model=schemas.ApplyResponse)
async def apply_selection(
    calendar_id: str,
    session: AsyncSession = Depends(get_session),
) -> schemas.ApplyResponse:
    """Block or unblock the selected dates."""

    return await calendars_service.apply_selection(calendar_id, session)


@router.delete("/calendars/{calendar_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_calendar(calendar_id: str) -> Response:
    calendars_service.close_calendar(calendar_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
