# backend/fitclub/repositories/booking_repository.py
"""
Booking Repository for the FitClub booking backend

Implements all data access operations for booking management:
- Occupancy counts for group class occurrences
- Overlap lookups for personal training sessions (half-open intervals)
- Member and trainer booking listings
- Booking totals for admin views
- Constraint-guarded inserts

All interval queries use the half-open rule: ``[a, b)`` and ``[c, d)``
overlap iff ``a < d and b > c``.
"""

from datetime import date, datetime
import logging
from typing import Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.enums import BookingStatus, BookingType
from ..core.exceptions import RepositoryException
from ..models.booking import Booking, GroupClassBooking, PersonalTrainingBooking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_CONFIRMED = BookingStatus.CONFIRMED.value


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for booking data access.

    Queries through ``Booking`` return the concrete variant
    (GroupClassBooking or PersonalTrainingBooking) based on ``type``.
    """

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def insert(self, booking: Booking) -> Booking:
        """
        Persist a new booking inside a SAVEPOINT.

        A unique/exclusion violation rolls back only the savepoint and is
        re-raised as ``IntegrityError`` so the service can translate it.
        """
        try:
            with self.db.begin_nested():
                self.db.add(booking)
                self.db.flush()
            return booking
        except IntegrityError:
            self.logger.warning(
                "Booking insert rejected by constraint",
                extra={"user_id": booking.user_id, "type": booking.type},
            )
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting booking: {str(e)}")
            raise RepositoryException(f"Failed to create booking: {str(e)}")

    # Group class occupancy

    def count_confirmed_for_occurrence(self, group_class_id: str, class_date: date) -> int:
        """Count confirmed seats for one class occurrence."""
        try:
            return (
                self.db.query(GroupClassBooking)
                .filter(
                    GroupClassBooking.group_class_id == group_class_id,
                    GroupClassBooking.class_date == class_date,
                    GroupClassBooking.status == _CONFIRMED,
                )
                .count()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting occurrence bookings: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}")

    def has_member_class_booking(self, user_id: str, group_class_id: str, class_date: date) -> bool:
        """True if the member already holds a confirmed seat in this occurrence."""
        try:
            return (
                self.db.query(GroupClassBooking.id)
                .filter(
                    GroupClassBooking.user_id == user_id,
                    GroupClassBooking.group_class_id == group_class_id,
                    GroupClassBooking.class_date == class_date,
                    GroupClassBooking.status == _CONFIRMED,
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking duplicate class booking: {str(e)}")
            raise RepositoryException(f"Failed to check duplicate booking: {str(e)}")

    # Personal training intervals

    def get_trainer_bookings_in_range(
        self, trainer_id: str, range_start: datetime, range_end: datetime
    ) -> List[PersonalTrainingBooking]:
        """
        Confirmed sessions for a trainer intersecting ``[range_start, range_end)``.

        Ordered by start time.
        """
        try:
            return (
                self.db.query(PersonalTrainingBooking)
                .filter(
                    PersonalTrainingBooking.trainer_id == trainer_id,
                    PersonalTrainingBooking.status == _CONFIRMED,
                    PersonalTrainingBooking.start_time < range_end,
                    PersonalTrainingBooking.end_time > range_start,
                )
                .order_by(PersonalTrainingBooking.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading trainer bookings: {str(e)}")
            raise RepositoryException(f"Failed to load trainer bookings: {str(e)}")

    def find_member_overlap(
        self, user_id: str, start: datetime, end: datetime
    ) -> Optional[PersonalTrainingBooking]:
        """First confirmed session of the member overlapping ``[start, end)``."""
        try:
            return (
                self.db.query(PersonalTrainingBooking)
                .filter(
                    PersonalTrainingBooking.user_id == user_id,
                    PersonalTrainingBooking.status == _CONFIRMED,
                    PersonalTrainingBooking.start_time < end,
                    PersonalTrainingBooking.end_time > start,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking member conflict: {str(e)}")
            raise RepositoryException(f"Failed to check conflict: {str(e)}")

    def find_trainer_overlap(
        self, trainer_id: str, start: datetime, end: datetime
    ) -> Optional[PersonalTrainingBooking]:
        """First confirmed session of the trainer overlapping ``[start, end)``."""
        try:
            return (
                self.db.query(PersonalTrainingBooking)
                .filter(
                    PersonalTrainingBooking.trainer_id == trainer_id,
                    PersonalTrainingBooking.status == _CONFIRMED,
                    PersonalTrainingBooking.start_time < end,
                    PersonalTrainingBooking.end_time > start,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking trainer conflict: {str(e)}")
            raise RepositoryException(f"Failed to check conflict: {str(e)}")

    # Listings

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Load a booking; the concrete variant is picked from ``type``."""
        try:
            return self.db.query(Booking).filter(Booking.id == booking_id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve booking: {str(e)}")

    def get_member_bookings(
        self,
        user_id: str,
        *,
        status: Optional[str] = None,
        upcoming_after: Optional[datetime] = None,
        limit: Optional[int] = DEFAULT_QUERY_LIMIT,
    ) -> List[Booking]:
        """
        Bookings owned by a member, newest first.

        Args:
            user_id: Member ID
            status: Optional status filter
            upcoming_after: When set, keep only bookings whose session starts
                at or after this instant. For class bookings that is the
                occurrence start from the class schedule, so a class that
                began earlier today is no longer upcoming.
            limit: Maximum rows, None for all
        """
        try:
            query = self.db.query(Booking).filter(Booking.user_id == user_id)
            if status:
                query = query.filter(Booking.status == status)
            query = query.order_by(Booking.created_at.desc(), Booking.id.desc())
            if upcoming_after is None:
                return (query.limit(limit) if limit is not None else query).all()

            # class_date narrows class bookings to the day, the schedule decides within it
            candidates = query.filter(
                or_(
                    and_(
                        Booking.type == BookingType.GROUP_CLASS.value,
                        Booking.class_date >= upcoming_after.date(),
                    ),
                    and_(
                        Booking.type == BookingType.PERSONAL_TRAINING.value,
                        Booking.start_time >= upcoming_after,
                    ),
                )
            ).all()
            upcoming = [b for b in candidates if b.effective_start() >= upcoming_after]
            return upcoming[:limit] if limit is not None else upcoming
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for member {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def count_for_member(self, user_id: str) -> int:
        """All bookings of a member, any status."""
        try:
            return self.db.query(Booking).filter(Booking.user_id == user_id).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings for member {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}")

    def count_for_class(self, group_class_id: str) -> int:
        """All bookings ever made for a class, any status and date."""
        try:
            return (
                self.db.query(GroupClassBooking)
                .filter(GroupClassBooking.group_class_id == group_class_id)
                .count()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings for class {group_class_id}: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}")

    def count_by_class(self) -> Dict[str, int]:
        """Booking totals keyed by class ID, any status and date."""
        try:
            rows = (
                self.db.query(GroupClassBooking.group_class_id, func.count(GroupClassBooking.id))
                .group_by(GroupClassBooking.group_class_id)
                .all()
            )
            return {class_id: int(total) for class_id, total in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings per class: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}")

    def get_trainer_sessions(
        self, trainer_id: str, *, upcoming_after: Optional[datetime] = None
    ) -> List[PersonalTrainingBooking]:
        """Confirmed personal training sessions led by a trainer, soonest first."""
        try:
            query = (
                self.db.query(PersonalTrainingBooking)
                .options(joinedload(PersonalTrainingBooking.user))
                .filter(
                    PersonalTrainingBooking.trainer_id == trainer_id,
                    PersonalTrainingBooking.status == _CONFIRMED,
                )
            )
            if upcoming_after is not None:
                query = query.filter(PersonalTrainingBooking.start_time >= upcoming_after)
            return query.order_by(PersonalTrainingBooking.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing sessions for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list trainer sessions: {str(e)}")
