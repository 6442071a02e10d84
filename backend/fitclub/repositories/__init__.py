# backend/fitclub/repositories/__init__.py
"""
Repository Pattern Implementation for the FitClub booking backend

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- IRepository: Interface defining required methods for all repositories
- RepositoryFactory: Factory for creating repository instances
- BookingRepository: Occupancy counts, interval overlap checks, listings
- MembershipRepository: Derived current membership, history, lapse handling

Usage:
    from fitclub.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    booked = repository.count_confirmed_for_occurrence(class_id, class_date)
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .group_class_repository import GroupClassRepository
from .membership_repository import MembershipPackageRepository, MembershipRepository
from .notification_repository import NotificationRepository
from .payment_repository import PaymentRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "GroupClassRepository",
    "IRepository",
    "MembershipPackageRepository",
    "MembershipRepository",
    "NotificationRepository",
    "PaymentRepository",
    "RepositoryFactory",
    "UserRepository",
]
