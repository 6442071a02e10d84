# backend/fitclub/models/booking.py
"""
Booking models for the FitClub booking backend.

A booking is either a seat in a group class occurrence or a personal
training session with a trainer. Both live in the ``bookings`` table and are
mapped with single-table inheritance on the ``type`` discriminator:

- GroupClassBooking: group_class_id + class_date
- PersonalTrainingBooking: trainer_id + start_time + end_time

The check constraint ``ck_bookings_variant_fields`` guarantees that exactly
one field group is populated and that it matches ``type``. The partial
unique indexes below back the service-level conflict checks so that a
racing insert fails at the storage boundary instead of double-booking.
"""

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import Any, Optional

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import BookingStatus, BookingType
from ..database import Base
from .types import UTCDateTime

logger = logging.getLogger(__name__)

# Constraint names are matched when translating IntegrityError into conflicts
UQ_MEMBER_CLASS_OCCURRENCE = "uq_bookings_member_class_occurrence"
UQ_TRAINER_SLOT = "uq_bookings_trainer_slot"
UQ_MEMBER_SLOT = "uq_bookings_member_slot"
EX_TRAINER_OVERLAP = "bookings_no_overlap_per_trainer"
EX_MEMBER_OVERLAP = "bookings_no_overlap_per_member"

_CONFIRMED = text("status = 'confirmed'")
_CONFIRMED_PERSONAL = text("status = 'confirmed' AND type = 'personal_training'")


class Booking(Base):
    """
    Common booking columns and lifecycle.

    Lifecycle: confirmed -> cancelled, confirmed -> completed. Both targets
    are terminal.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    notes = Column(Text, nullable=False, default="")

    # Group class occurrence
    group_class_id = Column(String(26), ForeignKey("group_classes.id"), nullable=True, index=True)
    class_date = Column(Date, nullable=True)

    # Personal training session
    trainer_id = Column(String(26), ForeignKey("users.id"), nullable=True, index=True)
    start_time = Column(UTCDateTime, nullable=True)
    end_time = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())
    cancelled_at = Column(UTCDateTime, nullable=True)

    user = relationship("User", foreign_keys=[user_id])

    __mapper_args__ = {"polymorphic_on": type}

    __table_args__ = (
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "(type = 'group_class'"
            " AND group_class_id IS NOT NULL AND class_date IS NOT NULL"
            " AND trainer_id IS NULL AND start_time IS NULL AND end_time IS NULL)"
            " OR (type = 'personal_training'"
            " AND trainer_id IS NOT NULL AND start_time IS NOT NULL AND end_time IS NOT NULL"
            " AND group_class_id IS NULL AND class_date IS NULL)",
            name="ck_bookings_variant_fields",
        ),
        CheckConstraint(
            "start_time IS NULL OR start_time < end_time",
            name="check_time_order",
        ),
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id}: user={self.user_id}, status={self.status}>"

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED.value

    @property
    def is_cancellable(self) -> bool:
        """Only confirmed bookings can move to cancelled."""
        return self.is_confirmed

    def effective_start(self) -> datetime:
        """Instant the booked session begins. Overridden per variant."""
        raise NotImplementedError

    def effective_end(self) -> datetime:
        raise NotImplementedError

    def cancel(self, now: Optional[datetime] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = now or datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} cancelled")

    def display_status(self, now: datetime) -> str:
        """
        Status shown to clients.

        A confirmed booking whose session has ended reads as ``completed``.
        Nothing is written; completion is derived from the clock.
        """
        if self.is_confirmed and self.effective_end() <= now:
            return BookingStatus.COMPLETED.value
        return str(self.status)


class GroupClassBooking(Booking):
    """A member's seat in one occurrence of a group class."""

    group_class = relationship("GroupClass", foreign_keys=[Booking.group_class_id])

    __mapper_args__ = {"polymorphic_identity": BookingType.GROUP_CLASS.value}

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.CONFIRMED.value
        if self.notes is None:
            self.notes = ""

    def effective_start(self) -> datetime:
        class_date: date = self.class_date
        if self.group_class is not None:
            return self.group_class.occurrence_start(class_date)
        return datetime.combine(class_date, time.min, tzinfo=timezone.utc)

    def effective_end(self) -> datetime:
        class_date: date = self.class_date
        if self.group_class is not None:
            return self.group_class.occurrence_end(class_date)
        return datetime.combine(class_date, time.min, tzinfo=timezone.utc) + timedelta(days=1)


class PersonalTrainingBooking(Booking):
    """A one-to-one session occupying ``[start_time, end_time)`` for member and trainer."""

    trainer = relationship("User", foreign_keys=[Booking.trainer_id])

    __mapper_args__ = {"polymorphic_identity": BookingType.PERSONAL_TRAINING.value}

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.CONFIRMED.value
        if self.notes is None:
            self.notes = ""

    def effective_start(self) -> datetime:
        start: datetime = self.start_time
        return start

    def effective_end(self) -> datetime:
        end: datetime = self.end_time
        return end


Index(
    UQ_MEMBER_CLASS_OCCURRENCE,
    Booking.user_id,
    Booking.group_class_id,
    Booking.class_date,
    unique=True,
    sqlite_where=_CONFIRMED,
    postgresql_where=_CONFIRMED,
)

Index(
    UQ_TRAINER_SLOT,
    Booking.trainer_id,
    Booking.start_time,
    unique=True,
    sqlite_where=_CONFIRMED_PERSONAL,
    postgresql_where=_CONFIRMED_PERSONAL,
)

Index(
    UQ_MEMBER_SLOT,
    Booking.user_id,
    Booking.start_time,
    unique=True,
    sqlite_where=_CONFIRMED_PERSONAL,
    postgresql_where=_CONFIRMED_PERSONAL,
)

Index(
    "ix_bookings_class_occurrence_status",
    Booking.group_class_id,
    Booking.class_date,
    Booking.status,
)
