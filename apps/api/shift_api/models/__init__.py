"""Expose ORM models."""
from .blocked_date import BlockedDate
from .booking_request import BookingRequest
from .listing import Listing

__all__ = [
    "BlockedDate",
    "BookingRequest",
    "Listing",
]
