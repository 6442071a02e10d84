# backend/fitclub/schemas/booking.py
"""
Booking request and response schemas.

Requests are strict (unknown fields are rejected). Responses expose the
display status, so a confirmed booking whose session has ended reads as
``completed``.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ..models.booking import Booking, GroupClassBooking, PersonalTrainingBooking
from ._strict_base import StrictRequestModel
from .base import StandardizedModel


class GroupClassBookingCreate(StrictRequestModel):
    """Book one occurrence of a group class."""

    class_date: str = Field(
        ...,
        max_length=32,
        description="Occurrence day in YYYY-MM-DD format",
        examples=["2026-10-20"],
    )


class PersonalTrainingBookingCreate(StrictRequestModel):
    """Book a personal training session over ``[start_time, end_time)``."""

    start_time: datetime = Field(..., description="Session start (ISO 8601, UTC if no offset)")
    end_time: datetime = Field(..., description="Session end (ISO 8601, UTC if no offset)")
    notes: Optional[str] = Field(None, max_length=1000)


class PersonInfo(StandardizedModel):
    id: str
    full_name: str
    email: str


class ClassInfo(StandardizedModel):
    id: str
    name: str


class BookingResponse(StandardizedModel):
    """One booking of either kind."""

    id: str
    type: str
    status: str
    notes: str = ""
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    # Group class bookings
    group_class: Optional[ClassInfo] = None
    class_date: Optional[date] = None

    # Personal training bookings
    trainer: Optional[PersonInfo] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking, now: datetime) -> "BookingResponse":
        data = {
            "id": booking.id,
            "type": booking.type,
            "status": booking.display_status(now),
            "notes": booking.notes or "",
            "created_at": booking.created_at,
            "cancelled_at": booking.cancelled_at,
        }
        if isinstance(booking, GroupClassBooking):
            data["class_date"] = booking.class_date
            if booking.group_class is not None:
                data["group_class"] = ClassInfo.model_validate(booking.group_class)
        elif isinstance(booking, PersonalTrainingBooking):
            data["start_time"] = booking.start_time
            data["end_time"] = booking.end_time
            if booking.trainer is not None:
                data["trainer"] = PersonInfo.model_validate(booking.trainer)
        return cls(**data)


class TrainerSessionResponse(StandardizedModel):
    """A personal training session as seen by the trainer leading it."""

    id: str
    member: PersonInfo
    start_time: datetime
    end_time: datetime
    notes: str = ""
    status: str

    @classmethod
    def from_booking(
        cls, booking: PersonalTrainingBooking, now: datetime
    ) -> "TrainerSessionResponse":
        return cls(
            id=booking.id,
            member=PersonInfo.model_validate(booking.user),
            start_time=booking.start_time,
            end_time=booking.end_time,
            notes=booking.notes or "",
            status=booking.display_status(now),
        )
