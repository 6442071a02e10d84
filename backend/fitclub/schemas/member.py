"""Admin member directory and the caller's profile."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.user import User
from .base import StandardizedModel
from .booking import BookingResponse
from .membership import MembershipHistoryEntry, MembershipResponse


class UserInfo(StandardizedModel):
    id: str
    email: str
    full_name: str
    role: str
    is_active: bool = True
    created_at: Optional[datetime] = None


class ProfileResponse(StandardizedModel):
    user: UserInfo
    membership: Optional[MembershipResponse] = None

    @classmethod
    def from_profile(cls, profile: Dict[str, Any]) -> "ProfileResponse":
        membership = profile["membership"]
        return cls(
            user=UserInfo.model_validate(profile["user"]),
            membership=MembershipResponse.model_validate(membership) if membership else None,
        )


class MemberSummary(StandardizedModel):
    user: UserInfo
    current_membership: Optional[MembershipResponse] = None
    bookings_count: int
    upcoming_bookings: int


class MemberStatistics(StandardizedModel):
    total_members: int
    active_members: int
    inactive_members: int
    average_membership_days: int
    new_members_last_30_days: int
    new_members_percentage: int


class MemberListResponse(StandardizedModel):
    members: List[MemberSummary]
    statistics: MemberStatistics

    @classmethod
    def from_directory(cls, directory: Dict[str, Any]) -> "MemberListResponse":
        return cls(
            members=[
                MemberSummary(
                    user=UserInfo.model_validate(entry["user"]),
                    current_membership=(
                        MembershipResponse.model_validate(entry["current_membership"])
                        if entry["current_membership"]
                        else None
                    ),
                    bookings_count=entry["bookings_count"],
                    upcoming_bookings=entry["upcoming_bookings"],
                )
                for entry in directory["members"]
            ],
            statistics=MemberStatistics(**directory["statistics"]),
        )


class MemberBookingStatistics(StandardizedModel):
    total_bookings: int
    upcoming_bookings: int


class MemberDetailResponse(StandardizedModel):
    user: UserInfo
    current_membership: Optional[MembershipResponse] = None
    membership_history: List[MembershipHistoryEntry]
    bookings: List[BookingResponse]
    statistics: MemberBookingStatistics

    @classmethod
    def from_detail(cls, detail: Dict[str, Any], now: datetime) -> "MemberDetailResponse":
        user: User = detail["user"]
        current = detail["current_membership"]
        return cls(
            user=UserInfo.model_validate(user),
            current_membership=MembershipResponse.model_validate(current) if current else None,
            membership_history=[
                MembershipHistoryEntry.from_membership(membership, now)
                for membership in detail["membership_history"]
            ],
            bookings=[BookingResponse.from_booking(booking, now) for booking in detail["bookings"]],
            statistics=MemberBookingStatistics(**detail["statistics"]),
        )
