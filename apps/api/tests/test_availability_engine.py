"""Tests for the availability calendar state machine and commit protocol."""
from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest

from shift_api.services import availability as engine
from shift_api.services.availability import CalendarMode, CommitPolicy

TODAY = date(2024, 7, 1)


class RecordingGateway:
    """Gateway stub capturing the dates handed over on commit."""

    def __init__(self, *, fail: bool = False) -> None:
        self.blocked: list[tuple[str, list[str]]] = []
        self.unblocked: list[tuple[str, list[str]]] = []
        self.fail = fail

    async def block_dates(self, listing_id: str, dates: list[str]) -> None:
        if self.fail:
            raise RuntimeError("store unavailable")
        self.blocked.append((listing_id, dates))

    async def unblock_dates(self, listing_id: str, dates: list[str]) -> None:
        if self.fail:
            raise RuntimeError("store unavailable")
        self.unblocked.append((listing_id, dates))


def _calendar(**kwargs) -> engine.CalendarState:
    return engine.open_calendar("villa-1", ["2024-07-04"], month=date(2024, 7, 1), **kwargs)


@pytest.mark.asyncio
async def test_unblock_scenario_commits_and_returns_to_view() -> None:
    gateway = RecordingGateway()
    state = engine.set_mode(_calendar(), CalendarMode.UNBLOCK)

    state = engine.toggle_date(state, date(2024, 7, 4), TODAY)
    assert state.selection == {"2024-07-04"}

    state = engine.toggle_date(state, date(2024, 7, 5), TODAY)
    assert state.selection == {"2024-07-04"}

    outcome = await engine.apply(state, gateway)

    assert gateway.unblocked == [("villa-1", ["2024-07-04"])]
    assert gateway.blocked == []
    assert outcome.committed
    assert outcome.state.mode is CalendarMode.VIEW
    assert outcome.state.selection == frozenset()


def test_open_calendar_starts_in_view_mode() -> None:
    state = _calendar()

    assert state.mode is CalendarMode.VIEW
    assert state.selection == frozenset()
    assert state.blocked_dates == {"2024-07-04"}


def test_view_mode_selects_nothing() -> None:
    state = _calendar()

    assert not engine.can_select(state, date(2024, 7, 10), TODAY)
    assert engine.toggle_date(state, date(2024, 7, 10), TODAY) is state


def test_block_mode_only_accepts_free_future_dates() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)

    assert engine.can_select(state, date(2024, 7, 10), TODAY)
    assert engine.can_select(state, TODAY, TODAY)
    assert not engine.can_select(state, date(2024, 7, 4), TODAY)
    assert not engine.can_select(state, date(2024, 6, 30), TODAY)


def test_unblock_mode_only_accepts_blocked_future_dates() -> None:
    state = engine.open_calendar("villa-1", ["2024-06-28", "2024-07-04"], month=date(2024, 7, 1))
    state = engine.set_mode(state, CalendarMode.UNBLOCK)

    assert engine.can_select(state, "2024-07-04", TODAY)
    assert not engine.can_select(state, "2024-07-05", TODAY)
    assert not engine.can_select(state, "2024-06-28", TODAY)


def test_toggle_twice_removes_date() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)

    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)
    state = engine.toggle_date(state, date(2024, 7, 11), TODAY)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)

    assert state.selection == {"2024-07-11"}


@pytest.mark.parametrize("target", list(CalendarMode))
def test_switching_mode_always_empties_selection(target) -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)
    assert state.selection

    state = engine.set_mode(state, target)

    assert state.mode is target
    assert state.selection == frozenset()


def test_read_only_calendar_stays_in_view() -> None:
    state = _calendar(read_only=True)

    state = engine.set_mode(state, CalendarMode.BLOCK)

    assert state.mode is CalendarMode.VIEW
    assert engine.available_modes(state) == (CalendarMode.VIEW,)
    assert engine.toggle_date(state, date(2024, 7, 10), TODAY).selection == frozenset()


def test_month_navigation_keeps_mode_and_selection() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)

    later = engine.next_month(engine.next_month(state))
    assert later.month == date(2024, 9, 1)
    assert later.mode is CalendarMode.BLOCK
    assert later.selection == state.selection
    assert later.blocked_dates == state.blocked_dates

    earlier = engine.previous_month(engine.show_month(state, 2025, 1))
    assert earlier.month == date(2024, 12, 1)
    assert earlier.selection == state.selection


@pytest.mark.asyncio
async def test_apply_with_empty_selection_is_noop() -> None:
    gateway = RecordingGateway()
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)

    outcome = await engine.apply(state, gateway)

    assert outcome.state is state
    assert outcome.request is None
    assert not outcome.committed
    assert gateway.blocked == []


@pytest.mark.asyncio
async def test_apply_sends_sorted_dates_for_block() -> None:
    gateway = RecordingGateway()
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    for day in (date(2024, 7, 12), date(2024, 7, 2), date(2024, 7, 9)):
        state = engine.toggle_date(state, day, TODAY)

    request = engine.stage(state)
    assert request is not None
    assert request.dates == ("2024-07-02", "2024-07-09", "2024-07-12")

    outcome = await engine.apply(state, gateway)

    assert gateway.blocked == [("villa-1", ["2024-07-02", "2024-07-09", "2024-07-12"])]
    assert outcome.state.mode is CalendarMode.VIEW


@pytest.mark.asyncio
async def test_optimistic_apply_keeps_reset_when_gateway_fails() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)

    outcome = await engine.apply(state, RecordingGateway(fail=True), CommitPolicy.OPTIMISTIC)

    assert outcome.state.mode is CalendarMode.VIEW
    assert outcome.state.selection == frozenset()
    assert isinstance(outcome.error, RuntimeError)
    assert not outcome.committed


@pytest.mark.asyncio
async def test_confirmed_apply_propagates_failure() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)

    with pytest.raises(RuntimeError):
        await engine.apply(state, RecordingGateway(fail=True), "confirmed")

    assert state.mode is CalendarMode.BLOCK
    assert state.selection == {"2024-07-10"}


@pytest.mark.asyncio
async def test_confirmed_apply_resets_after_success() -> None:
    gateway = AsyncMock()
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)

    outcome = await engine.apply(state, gateway, CommitPolicy.CONFIRMED)

    gateway.block_dates.assert_awaited_once_with("villa-1", ["2024-07-10"])
    assert outcome.committed
    assert outcome.state.mode is CalendarMode.VIEW


def test_refresh_drops_selection_that_became_ineligible() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)
    state = engine.toggle_date(state, date(2024, 7, 11), TODAY)

    state = engine.refresh(state, ["2024-07-04", date(2024, 7, 10)], sync_status="ok", today=TODAY)

    assert state.blocked_dates == {"2024-07-04", "2024-07-10"}
    assert state.selection == {"2024-07-11"}
    assert state.sync_status is engine.SyncStatus.OK


def test_month_view_grid_and_legend() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.BLOCK)
    state = engine.toggle_date(state, date(2024, 7, 10), TODAY)
    state = engine.toggle_date(state, date(2024, 7, 11), TODAY)

    view = engine.build_month_view(state, TODAY)

    assert view.title == "July 2024"
    assert view.leading_blanks == 1  # 2024-07-01 is a Monday
    assert len(view.days) == 31
    cells = {cell.key: cell for cell in view.days}
    assert cells["2024-07-04"].blocked and not cells["2024-07-04"].selectable
    assert cells["2024-07-10"].selected
    assert cells["2024-07-01"].selectable and not cells["2024-07-01"].past
    assert [entry.label for entry in view.legend] == ["Blocked", "Available", "Selected"]
    assert view.action_label == "Block 2 Dates"
    assert view.hint == "Click dates to block them"
    assert view.source_label == engine.SOURCE_LABEL_EDITABLE


def test_month_view_in_view_mode_hides_actions() -> None:
    state = engine.open_calendar("car-1", [], read_only=True, month=date(2024, 6, 1))

    view = engine.build_month_view(state, TODAY)

    assert all(cell.past for cell in view.days)
    assert not any(cell.selectable for cell in view.days)
    assert [entry.key for entry in view.legend] == ["blocked", "available"]
    assert view.action_label is None
    assert view.source_label == engine.SOURCE_LABEL_READ_ONLY


def test_action_label_singular() -> None:
    state = engine.set_mode(_calendar(), CalendarMode.UNBLOCK)
    state = engine.toggle_date(state, "2024-07-04", TODAY)

    assert engine.action_label(state) == "Unblock 1 Date"
