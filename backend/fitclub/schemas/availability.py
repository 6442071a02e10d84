# backend/fitclub/schemas/availability.py
"""Trainer listing and slot grid responses."""

from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import Field

from .base import Money, StandardizedModel


class TrainerSummary(StandardizedModel):
    id: str
    full_name: str
    email: str
    trainer_type: str
    hourly_rate: Money
    bio: Optional[str] = None


class TimeSlotResponse(StandardizedModel):
    start_time: datetime
    end_time: datetime
    available: bool
    display_time: str = Field(..., description="Wall-clock label, e.g. '10:00 - 11:00'")


class TrainerAvailabilityResponse(StandardizedModel):
    """Slot grid for one trainer on one day."""

    trainer_id: str
    trainer_name: str
    date: date_type
    hourly_rate: Money
    slots: List[TimeSlotResponse]
