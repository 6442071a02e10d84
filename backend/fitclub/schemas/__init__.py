# backend/fitclub/schemas/__init__.py
"""
Pydantic schemas for the FitClub API.

Request models forbid unknown fields; response models read straight from
ORM objects.
"""

from .availability import TimeSlotResponse, TrainerAvailabilityResponse, TrainerSummary
from .booking import (
    BookingResponse,
    GroupClassBookingCreate,
    PersonalTrainingBookingCreate,
    TrainerSessionResponse,
)
from .group_class import (
    AdminClassListResponse,
    AdminClassResponse,
    ClassDeletedResponse,
    ClassOccupancyResponse,
    GroupClassResponse,
    GroupClassUpdate,
    ScheduleSlot,
)
from .member import MemberDetailResponse, MemberListResponse, ProfileResponse
from .membership import (
    ChangePackageResponse,
    MembershipActionResponse,
    MembershipHistoryEntry,
    MembershipPackageResponse,
    MembershipResponse,
    PackageSelection,
    PaymentResponse,
    SubscribeResponse,
)

__all__ = [
    "AdminClassListResponse",
    "AdminClassResponse",
    "BookingResponse",
    "ChangePackageResponse",
    "ClassDeletedResponse",
    "ClassOccupancyResponse",
    "GroupClassBookingCreate",
    "GroupClassResponse",
    "GroupClassUpdate",
    "MemberDetailResponse",
    "MemberListResponse",
    "MembershipActionResponse",
    "MembershipHistoryEntry",
    "MembershipPackageResponse",
    "MembershipResponse",
    "PackageSelection",
    "PaymentResponse",
    "PersonalTrainingBookingCreate",
    "ProfileResponse",
    "ScheduleSlot",
    "SubscribeResponse",
    "TimeSlotResponse",
    "TrainerAvailabilityResponse",
    "TrainerSessionResponse",
    "TrainerSummary",
]
