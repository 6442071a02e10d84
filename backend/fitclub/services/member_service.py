# backend/fitclub/services/member_service.py
"""
Member directory for admins and the caller's own profile.

Nothing here writes. Membership state and booking counts are read through
the same repositories the lifecycle services use, so "current" and
"upcoming" mean the same thing everywhere.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import MEMBER_DETAIL_BOOKING_LIMIT, NEW_MEMBER_WINDOW_DAYS
from ..core.enums import MembershipStatus
from ..core.exceptions import ForbiddenException, NotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.membership import Membership
from ..models.user import User
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.membership_repository import MembershipRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class MemberService(BaseService):
    """Read-only views over accounts, their memberships and bookings."""

    def __init__(
        self,
        db: Session,
        user_repository: Optional[UserRepository] = None,
        membership_repository: Optional[MembershipRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )

    @staticmethod
    def _require_admin(actor: User) -> None:
        if not actor.is_admin:
            raise ForbiddenException("Only admins can view members", code="ADMIN_REQUIRED")

    def _current_membership(self, user: User, now: datetime) -> Optional[Membership]:
        if not user.is_member:
            return None
        return self.membership_repository.get_current(user.id, now)

    def _upcoming_count(self, user: User, now: datetime) -> int:
        return len(
            self.booking_repository.get_member_bookings(user.id, upcoming_after=now, limit=None)
        )

    @BaseService.measure_operation("list_members")
    def list_members(self, actor: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Members and trainers with booking counts, plus directory statistics.

        A member counts as active while their current membership has status
        active; a cancelled period that has not ended yet counts as inactive.
        Membership age is measured from account creation.

        Raises:
            ForbiddenException: Actor is not an admin
        """
        self._require_admin(actor)
        now = now or utc_now()
        users = self.user_repository.list_members()

        members: List[Dict[str, Any]] = []
        for user in users:
            members.append(
                {
                    "user": user,
                    "current_membership": self._current_membership(user, now),
                    "bookings_count": self.booking_repository.count_for_member(user.id),
                    "upcoming_bookings": self._upcoming_count(user, now),
                }
            )

        active = sum(
            1
            for entry in members
            if entry["current_membership"] is not None
            and entry["current_membership"].status == MembershipStatus.ACTIVE.value
        )
        ages = [
            (now - ensure_utc(user.created_at)).total_seconds() / 86400
            for user in users
            if user.created_at is not None
        ]
        window_start = now - timedelta(days=NEW_MEMBER_WINDOW_DAYS)
        new_members = sum(
            1
            for user in users
            if user.created_at is not None and ensure_utc(user.created_at) >= window_start
        )
        total = len(users)

        return {
            "members": members,
            "statistics": {
                "total_members": total,
                "active_members": active,
                "inactive_members": total - active,
                "average_membership_days": round(sum(ages) / len(ages)) if ages else 0,
                "new_members_last_30_days": new_members,
                "new_members_percentage": round(new_members / total * 100) if total else 0,
            },
        }

    @BaseService.measure_operation("get_member_detail")
    def get_member_detail(
        self, actor: User, member_id: str, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        One member or trainer with full membership history and latest bookings.

        Raises:
            ForbiddenException: Actor is not an admin
            NotFoundException: Unknown ID or an admin account
        """
        self._require_admin(actor)
        now = now or utc_now()
        user = self.user_repository.get_listed_member(member_id)
        if user is None:
            raise NotFoundException("Member not found", code="MEMBER_NOT_FOUND")

        return {
            "user": user,
            "current_membership": self._current_membership(user, now),
            "membership_history": self.membership_repository.get_history(user.id),
            "bookings": self.booking_repository.get_member_bookings(
                user.id, limit=MEMBER_DETAIL_BOOKING_LIMIT
            ),
            "statistics": {
                "total_bookings": self.booking_repository.count_for_member(user.id),
                "upcoming_bookings": self._upcoming_count(user, now),
            },
        }

    @BaseService.measure_operation("get_profile")
    def get_profile(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """The caller's account and, for members, their current membership."""
        now = now or utc_now()
        return {"user": user, "membership": self._current_membership(user, now)}
