# backend/fitclub/models/group_class.py
"""
Group class template.

A GroupClass is never booked directly. Members book an occurrence, the pair
``(group_class_id, class_date)``, and occupancy for that occurrence is always
counted from confirmed bookings. Occurrences have no table of their own.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, CheckConstraint, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import GroupClassStatus
from ..database import Base
from .types import UTCDateTime


def schedule_weekday(day: date) -> int:
    """Weekday number used by class schedules (0 = Sunday ... 6 = Saturday)."""
    return (day.weekday() + 1) % 7


class GroupClass(Base):
    """
    Recurring class template.

    Attributes:
        name: Display name
        description: Optional marketing copy
        trainer_user_id: Trainer leading the class (optional)
        capacity: Seats per occurrence; required and positive
        schedule: Ordered weekly slots, each
            ``{"day_of_week": 0-6, "start_time": "HH:MM", "end_time": "HH:MM"}``
            as UTC wall-clock times
        status: pending, approved or rejected; admins change it and only
            approved classes are listed and bookable
    """

    __tablename__ = "group_classes"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    trainer_user_id = Column(String(26), ForeignKey("users.id"), nullable=True, index=True)
    capacity = Column(Integer, nullable=False)
    schedule = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=GroupClassStatus.APPROVED.value)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    trainer = relationship("User", foreign_keys=[trainer_user_id])

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_class_capacity_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_group_classes_status"
        ),
    )

    def __repr__(self) -> str:
        return f"<GroupClass {self.id}: {self.name} capacity={self.capacity} status={self.status}>"

    @property
    def is_approved(self) -> bool:
        return self.status == GroupClassStatus.APPROVED.value

    @property
    def schedule_slots(self) -> List[Dict[str, Any]]:
        return list(self.schedule or [])

    def slot_for_date(self, class_date: date) -> Optional[Dict[str, Any]]:
        """Return the first weekly slot running on ``class_date``, if any."""
        weekday = schedule_weekday(class_date)
        for slot in self.schedule_slots:
            if int(slot.get("day_of_week", -1)) == weekday:
                return slot
        return None

    def runs_on(self, class_date: date) -> bool:
        return self.slot_for_date(class_date) is not None

    def occurrence_start(self, class_date: date) -> datetime:
        """
        Start instant of the occurrence on ``class_date``.

        Falls back to midnight UTC when no slot matches the weekday.
        """
        slot = self.slot_for_date(class_date)
        start = time.min
        if slot and slot.get("start_time"):
            hours, minutes = str(slot["start_time"]).split(":")[:2]
            start = time(int(hours), int(minutes))
        return datetime.combine(class_date, start, tzinfo=timezone.utc)

    def occurrence_end(self, class_date: date) -> datetime:
        """
        End instant of the occurrence on ``class_date``.

        Without a matching slot the whole day counts as the occurrence.
        """
        slot = self.slot_for_date(class_date)
        if slot and slot.get("end_time"):
            hours, minutes = str(slot["end_time"]).split(":")[:2]
            end = datetime.combine(class_date, time(int(hours), int(minutes)), tzinfo=timezone.utc)
            if end > self.occurrence_start(class_date):
                return end
        return datetime.combine(class_date, time.min, tzinfo=timezone.utc) + timedelta(days=1)
