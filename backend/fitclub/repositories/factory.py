# backend/fitclub/repositories/factory.py
"""
Repository Factory for the FitClub booking backend

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .group_class_repository import GroupClassRepository
    from .membership_repository import MembershipPackageRepository, MembershipRepository
    from .notification_repository import NotificationRepository
    from .payment_repository import PaymentRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for users and trainer lookups."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_group_class_repository(db: Session) -> "GroupClassRepository":
        """Create repository for group class templates."""
        from .group_class_repository import GroupClassRepository

        return GroupClassRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_membership_repository(db: Session) -> "MembershipRepository":
        """Create repository for membership periods."""
        from .membership_repository import MembershipRepository

        return MembershipRepository(db)

    @staticmethod
    def create_membership_package_repository(db: Session) -> "MembershipPackageRepository":
        """Create repository for the package catalog."""
        from .membership_repository import MembershipPackageRepository

        return MembershipPackageRepository(db)

    @staticmethod
    def create_payment_repository(db: Session) -> "PaymentRepository":
        """Create repository for payment records."""
        from .payment_repository import PaymentRepository

        return PaymentRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        """Create repository for scheduled notifications."""
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)
