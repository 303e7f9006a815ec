"""Listing model shared by villas, cars and yachts."""
from __future__ import annotations

from datetime import datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .blocked_date import BlockedDate


class ListingKind(str, enum.Enum):
    VILLA = "villa"
    CAR = "car"
    YACHT = "yacht"


class ListingSource(str, enum.Enum):
    MANUAL = "manual"
    API = "api"


class ListingSyncStatus(str, enum.Enum):
    NOT_APPLICABLE = "n/a"
    OK = "ok"
    STALE = "stale"
    ERROR = "error"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Store enum members by value so columns hold the same strings as the API."""

    return [member.value for member in enum_cls]


PRICE_UNITS: dict[ListingKind, str] = {
    ListingKind.VILLA: "per night",
    ListingKind.CAR: "per day",
    ListingKind.YACHT: "per hour",
}


class Listing(Base):
    """Rentable asset with its calendar source metadata."""

    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    kind: Mapped[ListingKind] = mapped_column(
        Enum(ListingKind, name="listing_kind", values_callable=_enum_values), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[ListingSource] = mapped_column(
        Enum(ListingSource, name="listing_source", values_callable=_enum_values),
        default=ListingSource.MANUAL,
        nullable=False,
    )
    read_only_calendar: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sync_status: Mapped[ListingSyncStatus] = mapped_column(
        Enum(ListingSyncStatus, name="listing_sync_status", values_callable=_enum_values),
        default=ListingSyncStatus.NOT_APPLICABLE,
        nullable=False,
    )
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    blocked_dates: Mapped[list["BlockedDate"]] = relationship(
        "BlockedDate", back_populates="listing", cascade="all, delete-orphan"
    )

    @property
    def calendar_read_only(self) -> bool:
        """Calendars fed by an external system of record cannot be edited here."""

        return self.read_only_calendar or self.source == ListingSource.API
