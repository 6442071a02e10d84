"""
Database models for the FitClub booking backend.

The models are organized by functionality:
- Users and trainer profiles
- Group class templates
- Bookings (group class seats and personal training sessions)
- Memberships, packages and payments
- Scheduled notifications
"""

from .booking import Booking, GroupClassBooking, PersonalTrainingBooking
from .group_class import GroupClass
from .membership import Membership, MembershipPackage
from .notification import Notification
from .payment import Payment
from .trainer_profile import TrainerProfile
from .user import User

__all__ = [
    "Booking",
    "GroupClass",
    "GroupClassBooking",
    "Membership",
    "MembershipPackage",
    "Notification",
    "Payment",
    "PersonalTrainingBooking",
    "TrainerProfile",
    "User",
]
