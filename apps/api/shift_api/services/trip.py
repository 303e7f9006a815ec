"""Trip composition: stay, vehicle and vessel legs with derived pricing.

Every mutation takes a ``TripState`` snapshot and returns a new one. Durations
and totals are computed from the snapshot on each read and never stored.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Literal, Optional

from ..core.config import settings

ListingKind = Literal["villa", "car", "yacht"]
LegKind = Literal["stay", "vehicle", "vessel"]

_UNSET = object()


@dataclass(frozen=True, slots=True)
class ListingRef:
    """Listing identity and unit price as handed over by listing lookup."""

    id: str
    price: int
    location: str = ""
    title: str = ""
    kind: Optional[ListingKind] = None


@dataclass(frozen=True, slots=True)
class StayDates:
    check_in: Optional[date] = None
    check_out: Optional[date] = None


@dataclass(frozen=True, slots=True)
class VehicleDates:
    pickup: Optional[date] = None
    dropoff: Optional[date] = None


@dataclass(frozen=True, slots=True)
class VesselBooking:
    listing: Optional[ListingRef] = None
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TripState:
    stay: Optional[ListingRef] = None
    stay_dates: StayDates = field(default_factory=StayDates)
    vehicle: Optional[ListingRef] = None
    vehicle_dates: VehicleDates = field(default_factory=VehicleDates)
    vessel: VesselBooking = field(default_factory=VesselBooking)
    location: str = ""


@dataclass(frozen=True, slots=True)
class QuoteLine:
    leg: LegKind
    listing_id: str
    title: str
    start: Optional[date]
    end: Optional[date]
    units: int
    unit_price: int
    total: int


@dataclass(frozen=True, slots=True)
class TripQuote:
    lines: tuple[QuoteLine, ...]
    stay_total: int
    vehicle_total: int
    vessel_total: int
    trip_total: int
    location: str


def empty_trip() -> TripState:
    return TripState()


def clear_trip() -> TripState:
    """Drop every leg and date; used on abandonment and after submission."""

    return empty_trip()


def set_stay(state: TripState, listing: ListingRef | None) -> TripState:
    """Replace the stay and re-tag the trip location."""

    return replace(state, stay=listing, location=listing.location if listing else "")


def set_stay_dates(state: TripState, dates: StayDates) -> TripState:
    """Replace the stay range, pulling attached legs back inside it.

    Vehicle repair runs pickup first, dropoff second, then resets both ends if
    they crossed. A vessel start date outside the range moves to check-in.
    """

    dates = StayDates(_as_date(dates.check_in), _as_date(dates.check_out))
    vehicle_dates = state.vehicle_dates
    vessel = state.vessel

    check_in, check_out = dates.check_in, dates.check_out
    if check_in is not None and check_out is not None:
        if state.vehicle is not None:
            vehicle_dates = _clamp_vehicle_dates(vehicle_dates, check_in, check_out)
        if vessel.listing is not None and vessel.start_date is not None:
            if vessel.start_date < check_in or vessel.start_date > check_out:
                vessel = replace(vessel, start_date=check_in)

    return replace(state, stay_dates=dates, vehicle_dates=vehicle_dates, vessel=vessel)


def _clamp_vehicle_dates(current: VehicleDates, check_in: date, check_out: date) -> VehicleDates:
    pickup, dropoff = current.pickup, current.dropoff

    if pickup is not None and (pickup < check_in or pickup > check_out):
        pickup = check_in
    if dropoff is not None and (dropoff > check_out or dropoff < check_in):
        dropoff = check_out
    if pickup is not None and dropoff is not None and pickup > dropoff:
        pickup, dropoff = check_in, check_out

    return VehicleDates(pickup=pickup, dropoff=dropoff)


def set_vehicle(state: TripState, listing: ListingRef | None) -> TripState:
    """Attach a vehicle over the stay range, or detach it and forget its dates."""

    if listing is None:
        return replace(state, vehicle=None, vehicle_dates=VehicleDates())
    return replace(
        state,
        vehicle=listing,
        vehicle_dates=VehicleDates(pickup=state.stay_dates.check_in, dropoff=state.stay_dates.check_out),
    )


def set_vehicle_dates(state: TripState, dates: VehicleDates) -> TripState:
    """Replace the vehicle range as given; the stay does not bound it here."""

    return replace(state, vehicle_dates=VehicleDates(_as_date(dates.pickup), _as_date(dates.dropoff)))


def remove_vehicle(state: TripState) -> TripState:
    return replace(set_vehicle(state, None), vehicle_dates=VehicleDates())


def set_vessel(state: TripState, listing: ListingRef | None) -> TripState:
    """Attach a vessel charter on the check-in day with the default window."""

    if listing is None:
        return replace(state, vessel=VesselBooking())
    return replace(
        state,
        vessel=VesselBooking(
            listing=listing,
            start_date=state.stay_dates.check_in,
            start_time=settings.vessel_default_start_time,
            end_time=settings.vessel_default_end_time,
        ),
    )


def update_vessel_booking(
    state: TripState,
    *,
    start_date: date | None | object = _UNSET,
    start_time: str | None | object = _UNSET,
    end_time: str | None | object = _UNSET,
) -> TripState:
    """Partially update the vessel booking; omitted fields keep their value."""

    vessel = state.vessel
    if start_date is not _UNSET:
        vessel = replace(vessel, start_date=_as_date(start_date))  # type: ignore[arg-type]
    if start_time is not _UNSET:
        vessel = replace(vessel, start_time=start_time)
    if end_time is not _UNSET:
        vessel = replace(vessel, end_time=end_time)
    return replace(state, vessel=vessel)


def remove_vessel(state: TripState) -> TripState:
    return set_vessel(state, None)


def is_date_within_stay(state: TripState, day: date) -> bool:
    """Return True when ``day`` falls inside the stay, or no full stay range is set."""

    check_in, check_out = state.stay_dates.check_in, state.stay_dates.check_out
    if check_in is None or check_out is None:
        return True
    day = _as_date(day)
    return check_in <= day <= check_out


def stay_nights(state: TripState) -> int:
    check_in, check_out = state.stay_dates.check_in, state.stay_dates.check_out
    if check_in is None or check_out is None:
        return 0
    return max(0, _day_span(check_in, check_out))


def vehicle_days(state: TripState) -> int:
    """Billable rental days; a same-day rental counts as one day."""

    pickup, dropoff = state.vehicle_dates.pickup, state.vehicle_dates.dropoff
    if state.vehicle is None or pickup is None or dropoff is None:
        return 0
    span = _day_span(pickup, dropoff)
    if span < 0:
        return 0
    return max(1, span)


def vessel_hours(state: TripState) -> int:
    """Charter length in whole hours, rounded half up, at least one."""

    vessel = state.vessel
    if vessel.listing is None or not vessel.start_time or not vessel.end_time:
        return 0
    minutes = _minutes_of_day(vessel.end_time) - _minutes_of_day(vessel.start_time)
    if minutes < 0:
        return 0
    return max(1, (minutes + 30) // 60)


def stay_total(state: TripState) -> int:
    if state.stay is None:
        return 0
    return state.stay.price * stay_nights(state)


def vehicle_total(state: TripState) -> int:
    if state.vehicle is None:
        return 0
    return state.vehicle.price * vehicle_days(state)


def vessel_total(state: TripState) -> int:
    if state.vessel.listing is None:
        return 0
    return state.vessel.listing.price * vessel_hours(state)


def trip_total(state: TripState) -> int:
    return stay_total(state) + vehicle_total(state) + vessel_total(state)


def build_quote(state: TripState) -> TripQuote:
    """Snapshot the per-leg breakdown handed to booking submission."""

    lines: list[QuoteLine] = []
    if state.stay is not None:
        lines.append(
            QuoteLine(
                leg="stay",
                listing_id=state.stay.id,
                title=state.stay.title,
                start=state.stay_dates.check_in,
                end=state.stay_dates.check_out,
                units=stay_nights(state),
                unit_price=state.stay.price,
                total=stay_total(state),
            )
        )
    if state.vehicle is not None:
        lines.append(
            QuoteLine(
                leg="vehicle",
                listing_id=state.vehicle.id,
                title=state.vehicle.title,
                start=state.vehicle_dates.pickup,
                end=state.vehicle_dates.dropoff,
                units=vehicle_days(state),
                unit_price=state.vehicle.price,
                total=vehicle_total(state),
            )
        )
    vessel = state.vessel
    if vessel.listing is not None:
        lines.append(
            QuoteLine(
                leg="vessel",
                listing_id=vessel.listing.id,
                title=vessel.listing.title,
                start=vessel.start_date,
                end=vessel.start_date,
                units=vessel_hours(state),
                unit_price=vessel.listing.price,
                total=vessel_total(state),
            )
        )

    return TripQuote(
        lines=tuple(lines),
        stay_total=stay_total(state),
        vehicle_total=vehicle_total(state),
        vessel_total=vessel_total(state),
        trip_total=trip_total(state),
        location=state.location,
    )


def _as_date(value: date | datetime | None) -> date | None:
    """Drop any time-of-day component."""

    if isinstance(value, datetime):
        return value.date()
    return value


def _day_span(start: date, end: date) -> int:
    return (_as_date(end) - _as_date(start)).days


def _minutes_of_day(value: str) -> int:
    hours, _, minutes = value.partition(":")
    return int(hours) * 60 + int(minutes or 0)
