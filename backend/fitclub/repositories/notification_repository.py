# backend/fitclub/repositories/notification_repository.py
"""Scheduled notification rows."""

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import NotificationStatus
from ..core.exceptions import RepositoryException
from ..models.notification import Notification
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def get_for_booking(self, booking_id: str) -> List[Notification]:
        try:
            return (
                self.db.query(Notification)
                .filter(Notification.booking_id == booking_id)
                .order_by(Notification.scheduled_for)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing notifications for booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    def cancel_pending_for_booking(self, booking_id: str) -> int:
        """Move the booking's pending notifications to cancelled."""
        try:
            pending = (
                self.db.query(Notification)
                .filter(
                    Notification.booking_id == booking_id,
                    Notification.status == NotificationStatus.PENDING.value,
                )
                .all()
            )
            for notification in pending:
                notification.status = NotificationStatus.CANCELLED.value
            if pending:
                self.db.flush()
            return len(pending)
        except SQLAlchemyError as e:
            self.logger.error(f"Error cancelling notifications for {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to cancel notifications: {str(e)}")
