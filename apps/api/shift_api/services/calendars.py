"""Open calendar sessions backed by the listing's blocked dates."""
from __future__ import annotations

import logging
from datetime import date
from uuid import uuid4

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..repositories import blocked_dates as blocked_dates_repo
from ..repositories import listings as listings_repo
from ..schemas import calendars as schemas
from . import availability as engine
from .session_store import calendar_store

logger = logging.getLogger(__name__)


def _today() -> date:
    return date.today()


async def open_listing_calendar(
    listing_id: str,
    payload: schemas.OpenCalendarRequest,
    session: AsyncSession,
) -> schemas.CalendarResponse:
    """Load a listing's availability into a fresh calendar in view mode."""

    listing = await listings_repo.get_listing(session, listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")

    blocked = await blocked_dates_repo.list_blocked_dates(session, listing_id=listing_id)

    today = _today()
    month = None
    if payload.year is not None and payload.month is not None:
        month = date(payload.year, payload.month, 1)

    state = engine.open_calendar(
        listing_id,
        blocked,
        read_only=listing.read_only_calendar,
        sync_status=listing.sync_status,
        last_synced_at=listing.last_synced_at,
        month=month,
        today=today,
    )
    calendar_id = str(uuid4())
    calendar_store.save(calendar_id, state)
    logger.info("Opened calendar %s for listing %s (%d blocked)", calendar_id, listing_id, len(blocked))
    return to_response(calendar_id, state, today)


def get_calendar(calendar_id: str) -> schemas.CalendarResponse:
    return to_response(calendar_id, _require(calendar_id), _today())


def set_mode(calendar_id: str, payload: schemas.SetModeRequest) -> schemas.CalendarResponse:
    state = engine.set_mode(_require(calendar_id), payload.mode)
    return _save(calendar_id, state)


def toggle_date(calendar_id: str, payload: schemas.ToggleDateRequest) -> schemas.CalendarResponse:
    state = engine.toggle_date(_require(calendar_id), payload.day, _today())
    return _save(calendar_id, state)


def show_month(calendar_id: str, payload: schemas.ShowMonthRequest) -> schemas.CalendarResponse:
    state = _require(calendar_id)
    if payload.year is not None and payload.month is not None:
        state = engine.show_month(state, payload.year, payload.month)
    elif payload.step is not None and payload.step < 0:
        state = engine.previous_month(state)
    elif payload.step is not None and payload.step > 0:
        state = engine.next_month(state)
    return _save(calendar_id, state)


def cancel(calendar_id: str) -> schemas.CalendarResponse:
    return _save(calendar_id, engine.cancel(_require(calendar_id)))


async def apply_selection(calendar_id: str, session: AsyncSession) -> schemas.ApplyResponse:
    """Commit the staged dates through the SQL gateway and re-read availability."""

    state = _require(calendar_id)
    gateway = blocked_dates_repo.SqlAvailabilityGateway(session)

    try:
        outcome = await engine.apply(state, gateway, settings.calendar_commit_policy)
    except Exception as exc:  # noqa: BLE001 - confirmed commits surface gateway failures
        logger.exception("Availability commit failed for listing %s", state.listing_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Availability update failed") from exc

    new_state = outcome.state
    if outcome.committed:
        blocked = await blocked_dates_repo.list_blocked_dates(session, listing_id=state.listing_id)
        new_state = engine.refresh(new_state, blocked, today=_today())

    calendar_store.save(calendar_id, new_state)
    request = outcome.request
    return schemas.ApplyResponse(
        calendar=to_response(calendar_id, new_state, _today()),
        committed_mode=request.mode if request else None,
        committed_dates=list(request.dates) if request else [],
        error=str(outcome.error) if outcome.error else None,
    )


def close_calendar(calendar_id: str) -> None:
    """Discard the calendar; nothing is persisted on close."""

    _require(calendar_id)
    calendar_store.clear(calendar_id)


def to_response(calendar_id: str, state: engine.CalendarState, today: date) -> schemas.CalendarResponse:
    view = engine.build_month_view(state, today)
    return schemas.CalendarResponse(
        calendar_id=calendar_id,
        listing_id=view.listing_id,
        year=view.year,
        month=view.month,
        title=view.title,
        mode=view.mode,
        modes=list(view.modes),
        read_only=view.read_only,
        leading_blanks=view.leading_blanks,
        days=[
            schemas.DayCellOut(
                day=cell.day,
                key=cell.key,
                blocked=cell.blocked,
                selected=cell.selected,
                past=cell.past,
                selectable=cell.selectable,
            )
            for cell in view.days
        ],
        legend=[schemas.LegendEntryOut(key=entry.key, label=entry.label) for entry in view.legend],
        selection=list(view.selection),
        blocked_dates=sorted(state.blocked_dates),
        action_label=view.action_label,
        hint=view.hint,
        source_label=view.source_label,
        sync_status=view.sync_status,
        last_synced_at=view.last_synced_at,
    )


def _require(calendar_id: str) -> engine.CalendarState:
    state = calendar_store.get(calendar_id)
    if state is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    return state


def _save(calendar_id: str, state: engine.CalendarState) -> schemas.CalendarResponse:
    calendar_store.save(calendar_id, state)
    return to_response(calendar_id, state, _today())
