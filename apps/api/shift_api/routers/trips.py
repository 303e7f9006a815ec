"""Trip composition endpoints, one trip per client session id."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import trips as schemas
from ..services import bookings as bookings_service
from ..services import trips as trips_service

router = APIRouter()


@router.get("/{session_id}", response_model=schemas.TripResponse)
async def get_trip(session_id: str) -> schemas.TripResponse:
    """Return the trip with freshly derived durations and totals."""

    return trips_service.get_trip(session_id)


@router.delete("/{session_id}", response_model=schemas.TripResponse)
async def clear_trip(session_id: str) -> schemas.TripResponse:
    """Abandon the trip and start over."""

    return trips_service.clear_trip(session_id)


@router.put("/{session_id}/stay", response_model=schemas.TripResponse)
async def set_stay(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    """Select or clear the stay."""

    return trips_service.set_stay(session_id, payload)


@router.put("/{session_id}/stay/dates", response_model=schemas.TripResponse)
async def set_stay_dates(session_id: str, payload: schemas.StayDatesIn) -> schemas.TripResponse:
    """Change the stay range; attached legs are pulled inside it."""

    return trips_service.set_stay_dates(session_id, payload)


@router.get("/{session_id}/stay/contains", response_model=schemas.StayDayCheck)
async def check_stay_day(session_id: str, day: date) -> schemas.StayDayCheck:
    """Report whether a day falls inside the stay; open ranges allow every day."""

    return trips_service.check_stay_day(session_id, day)


@router.put("/{session_id}/vehicle", response_model=schemas.TripResponse)
async def set_vehicle(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    """Attach a vehicle over the stay range, or clear it."""

    return trips_service.set_vehicle(session_id, payload)


@router.put("/{session_id}/vehicle/dates", response_model=schemas.TripResponse)
async def set_vehicle_dates(session_id: str, payload: schemas.VehicleDatesIn) -> schemas.TripResponse:
    """Set the rental window directly."""

    return trips_service.set_vehicle_dates(session_id, payload)


@router.delete("/{session_id}/vehicle", response_model=schemas.TripResponse)
async def remove_vehicle(session_id: str) -> schemas.TripResponse:
    return trips_service.remove_vehicle(session_id)


@router.put("/{session_id}/vessel", response_model=schemas.TripResponse)
async def set_vessel(session_id: str, payload: schemas.SetListingRequest) -> schemas.TripResponse:
    """Attach a vessel charter on check-in day, or clear it."""

    return trips_service.set_vessel(session_id, payload)


@router.patch("/{session_id}/vessel", response_model=schemas.TripResponse)
async def update_vessel(session_id: str, payload: schemas.VesselBookingPatch) -> schemas.TripResponse:
    """Adjust the charter day or hours."""

    return trips_service.update_vessel(session_id, payload)


@router.delete("/{session_id}/vessel", response_model=schemas.TripResponse)
async def remove_vessel(session_id: str) -> schemas.TripResponse:
    return trips_service.remove_vessel(session_id)


@router.post("/{session_id}/submit", response_model=schemas.SubmitTripResponse)
async def submit_trip(
    session_id: str,
    payload: schemas.SubmitTripRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.SubmitTripResponse:
    """Hand the composed trip over as a booking request."""

    return await bookings_service.submit_trip(session_id, payload, session)
