# backend/fitclub/repositories/membership_repository.py
"""
Membership Repository

The current membership is always derived: status active or cancelled and
``end_date >= now``. There is no pointer on the user row.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import CURRENT_MEMBERSHIP_STATUSES
from ..core.exceptions import RepositoryException
from ..models.membership import Membership, MembershipPackage
from .base_repository import BaseRepository


class MembershipPackageRepository(BaseRepository[MembershipPackage]):
    def __init__(self, db: Session):
        super().__init__(db, MembershipPackage)

    def list_by_price(self) -> List[MembershipPackage]:
        try:
            return (
                self.db.query(MembershipPackage)
                .order_by(MembershipPackage.price, MembershipPackage.name)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing packages: {str(e)}")
            raise RepositoryException(f"Failed to list packages: {str(e)}")


class MembershipRepository(BaseRepository[Membership]):
    def __init__(self, db: Session):
        super().__init__(db, Membership)

    def get_current(self, user_id: str, now: datetime) -> Optional[Membership]:
        """The member's current membership, latest end date first."""
        try:
            return (
                self.db.query(Membership)
                .filter(
                    Membership.user_id == user_id,
                    Membership.status.in_(CURRENT_MEMBERSHIP_STATUSES),
                    Membership.end_date >= now,
                )
                .order_by(Membership.end_date.desc())
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting current membership for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve membership: {str(e)}")

    def get_history(self, user_id: str) -> List[Membership]:
        """All memberships of a member, newest start first."""
        try:
            return (
                self.db.query(Membership)
                .filter(Membership.user_id == user_id)
                .order_by(Membership.start_date.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting membership history for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve membership history: {str(e)}")

    def expire_lapsed(self, user_id: str, now: datetime) -> int:
        """
        Store ``expired`` on memberships whose period already ended.

        Keeps the partial unique index on current memberships free for a new
        subscription. Returns the number of rows changed.
        """
        try:
            lapsed = (
                self.db.query(Membership)
                .filter(
                    Membership.user_id == user_id,
                    Membership.status.in_(CURRENT_MEMBERSHIP_STATUSES),
                    Membership.end_date < now,
                )
                .all()
            )
            for membership in lapsed:
                membership.expire()
            if lapsed:
                self.db.flush()
            return len(lapsed)
        except SQLAlchemyError as e:
            self.logger.error(f"Error expiring memberships for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to expire memberships: {str(e)}")
