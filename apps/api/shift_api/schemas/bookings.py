"""Schemas for booking request review."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ReviewRequest(BaseModel):
    admin_notes: str | None = None


class ReviewResponse(BaseModel):
    booking_request_id: str
    status: str
    blocked: dict[str, list[str]] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list, description="Listings with read-only calendars")
