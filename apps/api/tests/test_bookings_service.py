"""Tests for trip submission and booking request review."""
from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import HTTPException

from shift_api.models.booking_request import BookingRequestStatus
from shift_api.repositories import blocked_dates as blocked_dates_repo
from shift_api.repositories import booking_requests as booking_requests_repo
from shift_api.repositories import listings as listings_repo
from shift_api.schemas import bookings as booking_schemas
from shift_api.schemas import trips as trip_schemas
from shift_api.services import bookings as bookings_service
from shift_api.services import trip as composer
from shift_api.services.session_store import trip_store


class DummySession:
    """Minimal session stub supporting async transaction context."""

    def __init__(self) -> None:
        self.added: list[object] = []

    def add(self, obj: object) -> None:
        self.added.append(obj)

    def begin(self):  # noqa: D401 - mimic SQLAlchemy's async begin
        session = self

        class _Tx:
            async def __aenter__(self_inner):
                return session

            async def __aexit__(self_inner, exc_type, exc, tb):
                return False

        return _Tx()


GUEST = trip_schemas.GuestContact(name="Dana Reyes", email="dana@example.com", guests=4)


def _store_trip() -> str:
    state = composer.set_stay(
        composer.empty_trip(),
        composer.ListingRef(id="villa-1", price=1000, location="Miami", title="Casa del Mar", kind="villa"),
    )
    state = composer.set_stay_dates(state, composer.StayDates(date(2024, 6, 1), date(2024, 6, 5)))
    state = composer.set_vehicle(
        state, composer.ListingRef(id="car-1", price=200, location="Miami", title="Huracan", kind="car")
    )
    session_id = f"trip-{uuid4()}"
    trip_store.save(session_id, state)
    return session_id


def _request_stub(status: BookingRequestStatus = BookingRequestStatus.PENDING) -> SimpleNamespace:
    return SimpleNamespace(
        id="req-1",
        status=status,
        admin_notes=None,
        reviewed_at=None,
        legs_json=[
            {"leg": "stay", "listing_id": "villa-1", "start": "2024-06-01", "end": "2024-06-03"},
            {"leg": "vehicle", "listing_id": "car-1", "start": "2024-06-02", "end": "2024-06-02"},
            {"leg": "vessel", "listing_id": "yacht-1", "start": None, "end": None},
        ],
    )


def _listing_lookup(read_only: frozenset[str] = frozenset()):
    async def get_listing_stub(session, listing_id):
        return SimpleNamespace(id=listing_id, read_only_calendar=listing_id in read_only)

    return get_listing_stub


@pytest.mark.asyncio
async def test_submit_trip_persists_quote_and_clears_trip(monkeypatch):
    captured: dict[str, object] = {}

    async def create_stub(session, **kwargs):
        captured.update(kwargs)
        return "req-42"

    monkeypatch.setattr(booking_requests_repo, "create_booking_request", create_stub)
    session_id = _store_trip()

    response = await bookings_service.submit_trip(
        session_id, trip_schemas.SubmitTripRequest(guest=GUEST), DummySession()
    )

    assert response.booking_request_id == "req-42"
    assert response.status == "pending"
    assert response.trip_total == 4800
    assert [line.leg for line in response.lines] == ["stay", "vehicle"]
    assert captured["trip_total"] == 4800
    assert captured["guest_email"] == "dana@example.com"
    assert captured["location"] == "Miami"
    assert captured["legs"][0]["start"] == "2024-06-01"
    assert trip_store.get(session_id) == composer.empty_trip()


@pytest.mark.asyncio
async def test_submit_empty_trip_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await bookings_service.submit_trip(
            f"trip-{uuid4()}", trip_schemas.SubmitTripRequest(guest=GUEST), DummySession()
        )

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_approve_blocks_every_leg_day(monkeypatch):
    request = _request_stub()
    blocked_calls: list[tuple[str, list[date]]] = []

    async def get_stub(session, request_id):
        return request

    async def add_stub(session, *, listing_id, days):
        blocked_calls.append((listing_id, list(days)))
        return len(days)

    monkeypatch.setattr(listings_repo, "get_listing", _listing_lookup())
    monkeypatch.setattr(booking_requests_repo, "get_by_id", get_stub)
    monkeypatch.setattr(blocked_dates_repo, "add_blocked_dates", add_stub)
    session = DummySession()

    response = await bookings_service.approve_booking_request(
        "req-1", booking_schemas.ReviewRequest(admin_notes="Confirmed by phone"), session
    )

    assert response.status == "approved"
    assert response.blocked == {
        "villa-1": ["2024-06-01", "2024-06-02", "2024-06-03"],
        "car-1": ["2024-06-02"],
    }
    assert [listing for listing, _ in blocked_calls] == ["villa-1", "car-1"]
    assert request.status is BookingRequestStatus.APPROVED
    assert request.admin_notes == "Confirmed by phone"
    assert request.reviewed_at is not None
    assert request in session.added
    assert response.skipped == []


@pytest.mark.asyncio
async def test_deny_leaves_availability_alone(monkeypatch):
    request = _request_stub()

    async def get_stub(session, request_id):
        return request

    async def add_stub(session, *, listing_id, days):
        raise AssertionError("denial must not block dates")

    monkeypatch.setattr(booking_requests_repo, "get_by_id", get_stub)
    monkeypatch.setattr(blocked_dates_repo, "add_blocked_dates", add_stub)

    response = await bookings_service.deny_booking_request("req-1", booking_schemas.ReviewRequest(), DummySession())

    assert response.status == "denied"
    assert response.blocked == {}
    assert request.status is BookingRequestStatus.DENIED


@pytest.mark.asyncio
async def test_review_missing_request_returns_404(monkeypatch):
    async def get_stub(session, request_id):
        return None

    monkeypatch.setattr(booking_requests_repo, "get_by_id", get_stub)

    with pytest.raises(HTTPException) as exc:
        await bookings_service.approve_booking_request("nope", booking_schemas.ReviewRequest(), DummySession())

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_review_twice_returns_409(monkeypatch):
    request = _request_stub(BookingRequestStatus.APPROVED)

    async def get_stub(session, request_id):
        return request

    monkeypatch.setattr(booking_requests_repo, "get_by_id", get_stub)

    with pytest.raises(HTTPException) as exc:
        await bookings_service.deny_booking_request("req-1", booking_schemas.ReviewRequest(), DummySession())

    assert exc.value.status_code == 409


def test_leg_days_covers_inclusive_range():
    days = bookings_service._leg_days({"start": "2024-06-30", "end": "2024-07-02"})

    assert days == [date(2024, 6, 30), date(2024, 7, 1), date(2024, 7, 2)]
    assert bookings_service._leg_days({"start": "2024-06-30", "end": None}) == [date(2024, 6, 30)]
    assert bookings_service._leg_days({"start": None}) == []


@pytest.mark.asyncio
async def test_submit_stay_without_dates_is_rejected(monkeypatch):
    async def create_stub(session, **kwargs):
        raise AssertionError("undated trips must not be stored")

    monkeypatch.setattr(booking_requests_repo, "create_booking_request", create_stub)
    session_id = f"trip-{uuid4()}"
    state = composer.set_stay(composer.empty_trip(), composer.ListingRef("villa-1", 1000, "Miami"))
    trip_store.save(session_id, state)

    with pytest.raises(HTTPException) as exc:
        await bookings_service.submit_trip(session_id, trip_schemas.SubmitTripRequest(guest=GUEST), DummySession())

    assert exc.value.status_code == 400
    assert "stay" in exc.value.detail
    assert trip_store.get(session_id) == state


@pytest.mark.asyncio
async def test_submit_rejects_vehicle_missing_dropoff(monkeypatch):
    async def create_stub(session, **kwargs):
        raise AssertionError("undated trips must not be stored")

    monkeypatch.setattr(booking_requests_repo, "create_booking_request", create_stub)
    session_id = _store_trip()
    state = composer.set_vehicle_dates(trip_store.get(session_id), composer.VehicleDates(date(2024, 6, 2), None))
    trip_store.save(session_id, state)

    with pytest.raises(HTTPException) as exc:
        await bookings_service.submit_trip(session_id, trip_schemas.SubmitTripRequest(guest=GUEST), DummySession())

    assert exc.value.status_code == 400
    assert exc.value.detail.endswith("vehicle")


@pytest.mark.asyncio
async def test_submit_accepts_charter_with_start_day_only(monkeypatch):
    async def create_stub(session, **kwargs):
        return "req-7"

    monkeypatch.setattr(booking_requests_repo, "create_booking_request", create_stub)
    session_id = f"trip-{uuid4()}"
    state = composer.set_vessel(composer.empty_trip(), composer.ListingRef("yacht-1", 500, "Miami"))
    state = composer.update_vessel_booking(state, start_date=date(2024, 6, 2))
    trip_store.save(session_id, state)

    response = await bookings_service.submit_trip(
        session_id, trip_schemas.SubmitTripRequest(guest=GUEST), DummySession()
    )

    assert response.booking_request_id == "req-7"
    assert response.trip_total == 2000


@pytest.mark.asyncio
async def test_approve_skips_read_only_calendars(monkeypatch):
    request = _request_stub()
    blocked_calls: list[str] = []

    async def get_stub(session, request_id):
        return request

    async def add_stub(session, *, listing_id, days):
        blocked_calls.append(listing_id)
        return len(days)

    monkeypatch.setattr(booking_requests_repo, "get_by_id", get_stub)
    monkeypatch.setattr(listings_repo, "get_listing", _listing_lookup(frozenset({"villa-1"})))
    monkeypatch.setattr(blocked_dates_repo, "add_blocked_dates", add_stub)

    response = await bookings_service.approve_booking_request("req-1", booking_schemas.ReviewRequest(), DummySession())

    assert response.status == "approved"
    assert blocked_calls == ["car-1"]
    assert response.blocked == {"car-1": ["2024-06-02"]}
    assert response.skipped == ["villa-1"]
