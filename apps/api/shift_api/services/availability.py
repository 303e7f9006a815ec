"""Per-listing availability calendar with view/block/unblock modes."""
from __future__ import annotations

import calendar
import enum
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol

logger = logging.getLogger(__name__)

SOURCE_LABEL_READ_ONLY = "External API (Read Only)"
SOURCE_LABEL_EDITABLE = "Shift Fleet (Editable)"


class CalendarMode(str, enum.Enum):
    VIEW = "view"
    BLOCK = "block"
    UNBLOCK = "unblock"


class SyncStatus(str, enum.Enum):
    NOT_APPLICABLE = "n/a"
    OK = "ok"
    STALE = "stale"
    ERROR = "error"


class CommitPolicy(str, enum.Enum):
    """When the local selection is reset relative to the gateway call."""

    OPTIMISTIC = "optimistic"
    CONFIRMED = "confirmed"


class AvailabilityGateway(Protocol):
    """Persistence boundary for block/unblock commits."""

    async def block_dates(self, listing_id: str, dates: list[str]) -> None: ...

    async def unblock_dates(self, listing_id: str, dates: list[str]) -> None: ...


@dataclass(frozen=True, slots=True)
class CalendarState:
    listing_id: str
    month: date
    blocked_dates: frozenset[str] = frozenset()
    mode: CalendarMode = CalendarMode.VIEW
    selection: frozenset[str] = frozenset()
    read_only: bool = False
    sync_status: SyncStatus = SyncStatus.NOT_APPLICABLE
    last_synced_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class CommitRequest:
    listing_id: str
    mode: CalendarMode
    dates: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CommitOutcome:
    state: CalendarState
    request: Optional[CommitRequest] = None
    error: Optional[BaseException] = None

    @property
    def committed(self) -> bool:
        return self.request is not None and self.error is None


@dataclass(frozen=True, slots=True)
class DayCell:
    day: date
    key: str
    blocked: bool
    selected: bool
    past: bool
    selectable: bool


@dataclass(frozen=True, slots=True)
class LegendEntry:
    key: str
    label: str


@dataclass(frozen=True, slots=True)
class MonthView:
    """Everything a client needs to draw one month of the calendar."""

    listing_id: str
    year: int
    month: int
    title: str
    mode: CalendarMode
    read_only: bool
    leading_blanks: int
    days: tuple[DayCell, ...]
    legend: tuple[LegendEntry, ...]
    selection: tuple[str, ...]
    action_label: Optional[str]
    hint: Optional[str]
    source_label: str
    sync_status: SyncStatus
    last_synced_at: Optional[datetime]
    modes: tuple[CalendarMode, ...] = field(default=())


def date_key(value: date | datetime | str) -> str:
    """Normalise a date (or ISO string) into its ``yyyy-mm-dd`` key."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(value.strip()[:10]).isoformat()


def open_calendar(
    listing_id: str,
    blocked_dates: Iterable[date | str] = (),
    *,
    read_only: bool = False,
    sync_status: SyncStatus | str = SyncStatus.NOT_APPLICABLE,
    last_synced_at: datetime | None = None,
    month: date | None = None,
    today: date | None = None,
) -> CalendarState:
    """Seed a calendar from an external read; starts in view mode."""

    anchor = month or today or date.today()
    return CalendarState(
        listing_id=listing_id,
        month=anchor.replace(day=1),
        blocked_dates=frozenset(date_key(item) for item in blocked_dates),
        read_only=read_only,
        sync_status=SyncStatus(sync_status),
        last_synced_at=last_synced_at,
    )


def is_past(day: date | str, today: date | None = None) -> bool:
    return date.fromisoformat(date_key(day)) < (today or date.today())


def is_blocked(state: CalendarState, day: date | str) -> bool:
    return date_key(day) in state.blocked_dates


def can_select(state: CalendarState, day: date | str, today: date | None = None) -> bool:
    """Eligibility of a single date under the current mode."""

    if state.mode is CalendarMode.VIEW or is_past(day, today):
        return False
    blocked = is_blocked(state, day)
    if state.mode is CalendarMode.BLOCK:
        return not blocked
    return blocked


def available_modes(state: CalendarState) -> tuple[CalendarMode, ...]:
    if state.read_only:
        return (CalendarMode.VIEW,)
    return tuple(CalendarMode)


def set_mode(state: CalendarState, mode: CalendarMode | str) -> CalendarState:
    """Switch mode and drop the staged selection.

    Read-only calendars only ever reach view mode.
    """

    mode = CalendarMode(mode)
    if mode not in available_modes(state):
        logger.debug("Ignoring %s mode on read-only calendar %s", mode.value, state.listing_id)
        mode = CalendarMode.VIEW
    return replace(state, mode=mode, selection=frozenset())


def toggle_date(state: CalendarState, day: date | str, today: date | None = None) -> CalendarState:
    """Add or remove an eligible date; ineligible dates leave the state as is."""

    if not can_select(state, day, today):
        return state
    key = date_key(day)
    if key in state.selection:
        return replace(state, selection=state.selection - {key})
    return replace(state, selection=state.selection | {key})


def cancel(state: CalendarState) -> CalendarState:
    return replace(state, mode=CalendarMode.VIEW, selection=frozenset())


def show_month(state: CalendarState, year: int, month: int) -> CalendarState:
    return replace(state, month=date(year, month, 1))


def previous_month(state: CalendarState) -> CalendarState:
    return replace(state, month=(state.month - timedelta(days=1)).replace(day=1))


def next_month(state: CalendarState) -> CalendarState:
    return replace(state, month=(state.month.replace(day=28) + timedelta(days=4)).replace(day=1))


def refresh(
    state: CalendarState,
    blocked_dates: Iterable[date | str],
    *,
    sync_status: SyncStatus | str | None = None,
    last_synced_at: datetime | None = None,
    today: date | None = None,
) -> CalendarState:
    """Replace blocked dates from a fresh read and prune a now-stale selection."""

    refreshed = replace(
        state,
        blocked_dates=frozenset(date_key(item) for item in blocked_dates),
        sync_status=SyncStatus(sync_status) if sync_status is not None else state.sync_status,
        last_synced_at=last_synced_at if last_synced_at is not None else state.last_synced_at,
    )
    selection = frozenset(key for key in refreshed.selection if can_select(refreshed, key, today))
    return replace(refreshed, selection=selection)


def stage(state: CalendarState) -> CommitRequest | None:
    """First commit phase: describe what applying the selection would persist."""

    if state.mode is CalendarMode.VIEW or not state.selection:
        return None
    return CommitRequest(listing_id=state.listing_id, mode=state.mode, dates=tuple(sorted(state.selection)))


async def apply(
    state: CalendarState,
    gateway: AvailabilityGateway,
    policy: CommitPolicy | str = CommitPolicy.OPTIMISTIC,
) -> CommitOutcome:
    """Second commit phase: hand the staged dates to the gateway.

    Optimistic commits reset the calendar to view mode before the gateway call
    and keep that reset if it fails; the failure is logged and returned.
    Confirmed commits only reset after the gateway succeeds and let its error
    propagate, leaving the caller with the unchanged state.
    """

    request = stage(state)
    if request is None:
        return CommitOutcome(state=state)

    policy = CommitPolicy(policy)
    reset_state = cancel(state)

    if policy is CommitPolicy.CONFIRMED:
        await _send(gateway, request)
        return CommitOutcome(state=reset_state, request=request)

    try:
        await _send(gateway, request)
    except Exception as exc:  # noqa: BLE001 - optimistic commits report, not raise
        logger.warning(
            "Availability %s for listing %s failed after local reset: %s",
            request.mode.value,
            request.listing_id,
            exc,
        )
        return CommitOutcome(state=reset_state, request=request, error=exc)
    return CommitOutcome(state=reset_state, request=request)


async def _send(gateway: AvailabilityGateway, request: CommitRequest) -> None:
    dates = list(request.dates)
    if request.mode is CalendarMode.BLOCK:
        await gateway.block_dates(request.listing_id, dates)
    else:
        await gateway.unblock_dates(request.listing_id, dates)
    logger.info("Sent %s of %d date(s) for listing %s", request.mode.value, len(dates), request.listing_id)


def build_month_view(state: CalendarState, today: date | None = None) -> MonthView:
    """Derive the grid, legend and action bar for the visible month."""

    today = today or date.today()
    year, month = state.month.year, state.month.month
    _, days_in_month = calendar.monthrange(year, month)

    cells = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        key = day.isoformat()
        cells.append(
            DayCell(
                day=day,
                key=key,
                blocked=key in state.blocked_dates,
                selected=key in state.selection,
                past=is_past(day, today),
                selectable=can_select(state, day, today),
            )
        )

    legend = [LegendEntry("blocked", "Blocked"), LegendEntry("available", "Available")]
    if state.mode is not CalendarMode.VIEW:
        legend.append(LegendEntry("selected", "Selected"))

    return MonthView(
        listing_id=state.listing_id,
        year=year,
        month=month,
        title=f"{calendar.month_name[month]} {year}",
        mode=state.mode,
        read_only=state.read_only,
        leading_blanks=(date(year, month, 1).weekday() + 1) % 7,
        days=tuple(cells),
        legend=tuple(legend),
        selection=tuple(sorted(state.selection)),
        action_label=action_label(state),
        hint=_mode_hint(state.mode),
        source_label=SOURCE_LABEL_READ_ONLY if state.read_only else SOURCE_LABEL_EDITABLE,
        sync_status=state.sync_status,
        last_synced_at=state.last_synced_at,
        modes=available_modes(state),
    )


def action_label(state: CalendarState) -> str | None:
    """Label for the apply button, or None while the action bar is hidden."""

    if state.mode is CalendarMode.VIEW or not state.selection:
        return None
    count = len(state.selection)
    verb = "Block" if state.mode is CalendarMode.BLOCK else "Unblock"
    return f"{verb} {count} Date{'s' if count > 1 else ''}"


def _mode_hint(mode: CalendarMode) -> str | None:
    if mode is CalendarMode.BLOCK:
        return "Click dates to block them"
    if mode is CalendarMode.UNBLOCK:
        return "Click blocked dates to unblock them"
    return None
