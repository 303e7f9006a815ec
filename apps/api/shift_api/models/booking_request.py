"""Booking request model."""
from __future__ import annotations

from datetime import datetime
import enum

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class BookingRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class BookingRequest(Base):
    """Submitted trip awaiting concierge review."""

    __tablename__ = "booking_requests"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    session_id: Mapped[str | None] = mapped_column(String)
    guest_name: Mapped[str] = mapped_column(String, nullable=False)
    guest_email: Mapped[str] = mapped_column(String, nullable=False)
    guest_phone: Mapped[str | None] = mapped_column(String)
    guests: Mapped[int | None] = mapped_column(Integer)
    guest_notes: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str] = mapped_column(String, default="", nullable=False)
    legs_json: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)
    trip_total: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[BookingRequestStatus] = mapped_column(
        Enum(
            BookingRequestStatus,
            name="booking_request_status",
            values_callable=lambda statuses: [member.value for member in statuses],
        ),
        default=BookingRequestStatus.PENDING,
        nullable=False,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
