"""Group class catalog, occupancy and admin management schemas."""

from datetime import date as date_type
from typing import Any, Dict, List, Optional

from pydantic import Field, computed_field, field_validator, model_validator

from ..core.constants import DAYS_OF_WEEK
from ..core.enums import GroupClassStatus
from ._strict_base import StrictRequestModel
from .base import StandardizedModel


class ScheduleSlot(StandardizedModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def day_name(self) -> str:
        return DAYS_OF_WEEK[self.day_of_week]


class GroupClassResponse(StandardizedModel):
    id: str
    name: str
    description: Optional[str] = None
    trainer_user_id: Optional[str] = None
    capacity: int
    schedule: List[ScheduleSlot]
    status: str


class ClassOccupancyResponse(StandardizedModel):
    """Seats for one occurrence ``(class_id, date)``."""

    class_id: str
    date: date_type
    capacity: int
    booked: int
    available: int
    is_full: bool


class GroupClassUpdate(StrictRequestModel):
    """Admin edit of a class; only the fields sent are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=2000)
    trainer_user_id: Optional[str] = Field(None, max_length=26)
    capacity: Optional[int] = Field(None, ge=1)
    schedule: Optional[List[ScheduleSlot]] = Field(None, min_length=1)
    status: Optional[GroupClassStatus] = None

    @field_validator("schedule")
    @classmethod
    def slots_are_ordered(cls, value: Optional[List[ScheduleSlot]]) -> Optional[List[ScheduleSlot]]:
        for slot in value or []:
            start = _minutes(slot.start_time)
            end = _minutes(slot.end_time)
            if start is None or end is None:
                raise ValueError("times must be valid HH:MM")
            if start >= end:
                raise ValueError("start_time must be before end_time")
        return value

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "GroupClassUpdate":
        for field in ("name", "capacity", "schedule", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields present in the request, with enums and slots as plain values."""
        changes: Dict[str, Any] = {}
        for field in self.model_fields_set:
            value = getattr(self, field)
            if field == "schedule" and value is not None:
                value = [slot.model_dump(exclude={"day_name"}) for slot in value]
            elif isinstance(value, GroupClassStatus):
                value = value.value
            changes[field] = value
        return changes


class AdminClassResponse(GroupClassResponse):
    """A class as listed to admins, with every booking ever made for it."""

    total_bookings: int = 0


class ClassStatistics(StandardizedModel):
    total_classes: int
    pending_classes: int
    approved_classes: int
    rejected_classes: int


class AdminClassListResponse(StandardizedModel):
    classes: List[AdminClassResponse]
    statistics: ClassStatistics


class ClassDeletedResponse(StandardizedModel):
    message: str
    id: str


def _minutes(value: str) -> Optional[int]:
    hours, minutes = (int(part) for part in value.split(":"))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes
