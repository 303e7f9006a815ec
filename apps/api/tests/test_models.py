"""Tests for how listing and booking enums land in the database."""
from __future__ import annotations

from shift_api.models.booking_request import BookingRequest
from shift_api.models.listing import Listing


def test_enum_columns_store_values():
    columns = Listing.__table__.c

    assert columns.kind.type.enums == ["villa", "car", "yacht"]
    assert columns.source.type.enums == ["manual", "api"]
    assert columns.sync_status.type.enums == ["n/a", "ok", "stale", "error"]
    assert BookingRequest.__table__.c.status.type.enums == ["pending", "approved", "denied"]
