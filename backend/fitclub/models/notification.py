# backend/fitclub/models/notification.py
"""
Scheduled notifications.

Rows are written with status ``pending`` when a group class booking is
confirmed. A separate dispatch job picks up rows whose ``scheduled_for``
has passed and moves them to ``sent`` or ``failed``.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text
from sqlalchemy.sql import func
import ulid

from ..core.enums import NotificationStatus, NotificationType
from ..database import Base
from .types import UTCDateTime


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=True, index=True)
    type = Column(String(20), nullable=False, default=NotificationType.REMINDER.value)
    status = Column(String(20), nullable=False, default=NotificationStatus.PENDING.value)
    scheduled_for = Column(UTCDateTime, nullable=False)
    message = Column(Text, nullable=False, default="")
    sent_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'sent', 'cancelled', 'failed')",
            name="ck_notifications_status",
        ),
        CheckConstraint("type IN ('reminder')", name="ck_notifications_type"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.id}: {self.type} {self.status} at {self.scheduled_for}>"


# Dispatch job scans pending rows by due time
Index("ix_notifications_status_scheduled_for", Notification.status, Notification.scheduled_for)
