# backend/fitclub/services/notification_service.py
"""
Reminder producer.

Writes pending reminder rows when a group class seat is confirmed and
cancels them when the seat is released. Delivery is handled by a separate
dispatch job that reads due ``pending`` rows.
"""

from datetime import datetime, timedelta
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import DATE_FORMAT, REMINDER_MESSAGE_TEMPLATE, SLOT_LABEL_FORMAT
from ..core.enums import NotificationStatus, NotificationType
from ..models.booking import GroupClassBooking
from ..models.group_class import GroupClass
from ..models.notification import Notification
from ..repositories.factory import RepositoryFactory
from ..repositories.notification_repository import NotificationRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    def __init__(
        self,
        db: Session,
        notification_repository: Optional[NotificationRepository] = None,
    ):
        super().__init__(db)
        self.notification_repository = (
            notification_repository or RepositoryFactory.create_notification_repository(db)
        )

    @staticmethod
    def reminder_time(
        group_class: GroupClass, booking: GroupClassBooking, now: datetime
    ) -> datetime:
        """
        When the reminder becomes due.

        Occurrence start minus the configured offset, never earlier than ``now``.
        """
        starts_at = group_class.occurrence_start(booking.class_date)
        due = starts_at - timedelta(hours=settings.reminder_offset_hours)
        return max(due, now)

    @BaseService.measure_operation("schedule_class_reminder")
    def schedule_class_reminder(
        self, booking: GroupClassBooking, group_class: GroupClass, now: datetime
    ) -> Notification:
        """
        Add a pending reminder for a confirmed class booking.

        Runs inside the caller's transaction; nothing is committed here.
        """
        starts_at = group_class.occurrence_start(booking.class_date)
        notification = self.notification_repository.create(
            user_id=booking.user_id,
            booking_id=booking.id,
            type=NotificationType.REMINDER.value,
            status=NotificationStatus.PENDING.value,
            scheduled_for=self.reminder_time(group_class, booking, now),
            message=REMINDER_MESSAGE_TEMPLATE.format(
                class_name=group_class.name,
                start_time=starts_at.strftime(SLOT_LABEL_FORMAT),
                class_date=starts_at.strftime(DATE_FORMAT),
            ),
        )
        self.logger.info(
            "Scheduled reminder %s for booking %s at %s",
            notification.id,
            booking.id,
            notification.scheduled_for.isoformat(),
        )
        return notification

    @BaseService.measure_operation("cancel_booking_reminders")
    def cancel_booking_reminders(self, booking_id: str) -> int:
        """Cancel pending reminders of a booking. Sent ones are left alone."""
        cancelled = self.notification_repository.cancel_pending_for_booking(booking_id)
        if cancelled:
            self.logger.info(
                "Cancelled %d pending reminder(s) for booking %s", cancelled, booking_id
            )
        return cancelled
