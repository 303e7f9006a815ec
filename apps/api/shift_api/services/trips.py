"""Session-scoped trip handling for the trip endpoints."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from ..schemas import trips as schemas
from . import trip as composer
from .session_store import trip_store

logger = logging.getLogger(__name__)

TripMutation = Callable[[composer.TripState], composer.TripState]


def load_trip(session_id: str) -> composer.TripState:
    """Return the session's trip, starting an empty one on first use."""

    state = trip_store.get(session_id)
    if state is None:
        state = composer.empty_trip()
        trip_store.save(session_id, state)
    return state


def mutate_trip(session_id: str, mutation: TripMutation) -> schemas.TripResponse:
    """Apply a composer mutation to the stored trip and return the new view."""

    state = mutation(load_trip(session_id))
    trip_store.save(session_id, state)
    return to_response(session_id, state)


def get_trip(session_id: str) -> schemas.TripResponse:
    return to_response(session_id, load_trip(session_id))


def set_stay(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    listing = _to_ref(payload.listing)
    return mutate_trip(session_id, lambda state: composer.set_stay(state, listing))


def set_stay_dates(session_id: str, payload: schemas.StayDatesIn) -> schemas.TripResponse:
    dates = composer.StayDates(check_in=payload.check_in, check_out=payload.check_out)
    return mutate_trip(session_id, lambda state: composer.set_stay_dates(state, dates))


def check_stay_day(session_id: str, day: date) -> schemas.StayDayCheck:
    """Whether a picker should offer ``day`` for the vehicle or charter."""

    return schemas.StayDayCheck(day=day, within_stay=composer.is_date_within_stay(load_trip(session_id), day))


def set_vehicle(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    listing = _to_ref(payload.listing)
    return mutate_trip(session_id, lambda state: composer.set_vehicle(state, listing))


def set_vehicle_dates(session_id: str, payload: schemas.VehicleDatesIn) -> schemas.TripResponse:
    dates = composer.VehicleDates(pickup=payload.pickup, dropoff=payload.dropoff)
    return mutate_trip(session_id, lambda state: composer.set_vehicle_dates(state, dates))


def remove_vehicle(session_id: str) -> schemas.TripResponse:
    return mutate_trip(session_id, composer.remove_vehicle)


def set_vessel(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    listing = _to_ref(payload.listing)
    return mutate_trip(session_id, lambda state: composer.set_vessel(state, listing))


def update_vessel(session_id: str, payload: schemas.VesselBookingPatch) -> schemas.TripResponse:
    changes = payload.model_dump(exclude_unset=True)
    return mutate_trip(session_id, lambda state: composer.update_vessel_booking(state, **changes))


def remove_vessel(session_id: str) -> schemas.TripResponse:
    return mutate_trip(session_id, composer.remove_vessel)


def clear_trip(session_id: str) -> schemas.TripResponse:
    logger.info("Clearing trip for session %s", session_id)
    return mutate_trip(session_id, lambda _state: composer.clear_trip())


def to_response(session_id: str, state: composer.TripState) -> schemas.TripResponse:
    """Render a trip snapshot with every derived value read fresh."""

    return schemas.TripResponse(
        session_id=session_id,
        location=state.location,
        stay=schemas.StayOut(
            listing=_from_ref(state.stay),
            check_in=state.stay_dates.check_in,
            check_out=state.stay_dates.check_out,
            nights=composer.stay_nights(state),
            total=composer.stay_total(state),
        ),
        vehicle=schemas.VehicleOut(
            listing=_from_ref(state.vehicle),
            pickup=state.vehicle_dates.pickup,
            dropoff=state.vehicle_dates.dropoff,
            days=composer.vehicle_days(state),
            total=composer.vehicle_total(state),
        ),
        vessel=schemas.VesselOut(
            listing=_from_ref(state.vessel.listing),
            start_date=state.vessel.start_date,
            start_time=state.vessel.start_time,
            end_time=state.vessel.end_time,
            hours=composer.vessel_hours(state),
            total=composer.vessel_total(state),
        ),
        trip_total=composer.trip_total(state),
    )


def _to_ref(listing: schemas.ListingRefIn | None) -> composer.ListingRef | None:
    if listing is None:
        return None
    return composer.ListingRef(
        id=listing.id,
        price=listing.price,
        location=listing.location,
        title=listing.title,
        kind=listing.kind,
    )


def _from_ref(listing: composer.ListingRef | None) -> schemas.ListingRefIn | None:
    if listing is None:
        return None
    return schemas.ListingRefIn(
        id=listing.id,
        price=listing.price,
        location=listing.location,
        title=listing.title,
        kind=listing.kind,
    )
