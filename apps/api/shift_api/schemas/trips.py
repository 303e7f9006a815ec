"""Schemas for trip composition endpoints."""
from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, EmailStr, Field

TimeOfDay = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


class ListingRefIn(BaseModel):
    id: str
    price: int = Field(ge=0)
    location: str = ""
    title: str = ""
    kind: Literal["villa", "car", "yacht"] | None = None


class SetListingRequest(BaseModel):
    listing: ListingRefIn | None = None


class StayDatesIn(BaseModel):
    check_in: date | None = None
    check_out: date | None = None


class VehicleDatesIn(BaseModel):
    pickup: date | None = None
    dropoff: date | None = None


class VesselBookingPatch(BaseModel):
    start_date: date | None = None
    start_time: TimeOfDay | None = None
    end_time: TimeOfDay | None = None


class StayOut(BaseModel):
    listing: ListingRefIn | None = None
    check_in: date | None = None
    check_out: date | None = None
    nights: int = 0
    total: int = 0


class VehicleOut(BaseModel):
    listing: ListingRefIn | None = None
    pickup: date | None = None
    dropoff: date | None = None
    days: int = 0
    total: int = 0


class VesselOut(BaseModel):
    listing: ListingRefIn | None = None
    start_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    hours: int = 0
    total: int = 0


class TripResponse(BaseModel):
    session_id: str
    location: str = ""
    stay: StayOut
    vehicle: VehicleOut
    vessel: VesselOut
    trip_total: int = 0


class StayDayCheck(BaseModel):
    day: date
    within_stay: bool


class GuestContact(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str | None = None
    guests: int | None = Field(default=None, ge=1)
    notes: str | None = None


class QuoteLineOut(BaseModel):
    leg: Literal["stay", "vehicle", "vessel"]
    listing_id: str
    title: str = ""
    start: date | None = None
    end: date | None = None
    units: int
    unit_price: int
    total: int


class SubmitTripRequest(BaseModel):
    guest: GuestContact


class SubmitTripResponse(BaseModel):
    booking_request_id: str
    status: str
    lines: list[QuoteLineOut]
    trip_total: int
