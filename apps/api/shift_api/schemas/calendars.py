"""Schemas for the availability calendar endpoints."""
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from ..services.availability import CalendarMode, SyncStatus


class OpenCalendarRequest(BaseModel):
    year: int | None = Field(default=None, ge=1970, le=2200)
    month: int | None = Field(default=None, ge=1, le=12)


class SetModeRequest(BaseModel):
    mode: CalendarMode


class ToggleDateRequest(BaseModel):
    day: date


class ShowMonthRequest(BaseModel):
    year: int | None = Field(default=None, ge=1970, le=2200)
    month: int | None = Field(default=None, ge=1, le=12)
    step: int | None = Field(default=None, description="-1 for previous month, 1 for next")


class DayCellOut(BaseModel):
    day: date
    key: str
    blocked: bool
    selected: bool
    past: bool
    selectable: bool


class LegendEntryOut(BaseModel):
    key: str
    label: str


class CalendarResponse(BaseModel):
    calendar_id: str
    listing_id: str
    year: int
    month: int
    title: str
    mode: CalendarMode
    modes: list[CalendarMode]
    read_only: bool
    leading_blanks: int
    days: list[DayCellOut]
    legend: list[LegendEntryOut]
    selection: list[str]
    blocked_dates: list[str]
    action_label: str | None = None
    hint: str | None = None
    source_label: str
    sync_status: SyncStatus
    last_synced_at: datetime | None = None


class ApplyResponse(BaseModel):
    calendar: CalendarResponse
    committed_mode: CalendarMode | None = None
    committed_dates: list[str] = Field(default_factory=list)
    error: str | None = None
