# backend/fitclub/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.group_class_service import GroupClassService
from ...services.member_service import MemberService
from ...services.membership_service import MembershipService
from ...services.notification_service import NotificationService
from .database import get_db


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Get notification service instance."""
    return NotificationService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        notification_service: Reminder producer for class bookings

    Returns:
        BookingService instance
    """
    return BookingService(db, notification_service)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_group_class_service(db: Session = Depends(get_db)) -> GroupClassService:
    return GroupClassService(db)


def get_membership_service(db: Session = Depends(get_db)) -> MembershipService:
    return MembershipService(db)


def get_member_service(db: Session = Depends(get_db)) -> MemberService:
    return MemberService(db)
