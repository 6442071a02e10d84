# backend/fitclub/core/enums.py
"""
Core enums for the FitClub booking backend.

Values are the persisted strings; every enum subclasses ``str`` so the
members compare equal to raw column values and serialize as plain JSON.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role assigned at registration. Immutable afterwards."""

    ADMIN = "admin"
    TRAINER = "trainer"
    MEMBER = "member"


class TrainerType(str, Enum):
    PERSONAL = "personal"
    GROUP = "group"
    BOTH = "both"

    @property
    def offers_personal_training(self) -> bool:
        return self in (TrainerType.PERSONAL, TrainerType.BOTH)


class GroupClassStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingType(str, Enum):
    GROUP_CLASS = "group_class"
    PERSONAL_TRAINING = "personal_training"


class BookingStatus(str, Enum):
    """
    Booking lifecycle.

    confirmed -> cancelled and confirmed -> completed are the only transitions;
    both targets are terminal.
    """

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class NotificationType(str, Enum):
    REMINDER = "reminder"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    CANCELLED = "cancelled"
    FAILED = "failed"


# Statuses that make a membership eligible to be "current" while unexpired
CURRENT_MEMBERSHIP_STATUSES = (MembershipStatus.ACTIVE.value, MembershipStatus.CANCELLED.value)
