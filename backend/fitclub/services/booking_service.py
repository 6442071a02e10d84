# backend/fitclub/services/booking_service.py
"""
Booking Service for the FitClub booking backend

Handles the booking lifecycle for both booking kinds:
- Group class seats: duplicate and capacity checks against live counts
- Personal training sessions: member and trainer overlap checks
- Cancellation by the owner or an admin

Every pre-check is backed by a storage constraint. When a concurrent
request slips past the pre-check, the insert fails with IntegrityError and
is reported with the same conflict code the pre-check would have raised.
"""

from datetime import date, datetime
import logging
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.enums import BookingType
from ..core.exceptions import (
    BookingConflictException,
    ClassFullException,
    ConflictException,
    DuplicateBookingException,
    ForbiddenException,
    NotFoundException,
    TrainerUnavailableException,
    UserDoubleBookedException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, parse_date_param, utc_now
from ..models.booking import (
    EX_MEMBER_OVERLAP,
    EX_TRAINER_OVERLAP,
    UQ_MEMBER_CLASS_OCCURRENCE,
    UQ_MEMBER_SLOT,
    UQ_TRAINER_SLOT,
    Booking,
    GroupClassBooking,
    PersonalTrainingBooking,
)
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.group_class_repository import GroupClassRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .group_class_service import GroupClassService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes all booking business logic and coordinates
    with the reminder producer.
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        repository: Optional[BookingRepository] = None,
        group_class_repository: Optional[GroupClassRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.group_class_repository = (
            group_class_repository or RepositoryFactory.create_group_class_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.notification_service = notification_service or NotificationService(db)
        self.group_class_service = GroupClassService(
            db,
            group_class_repository=self.group_class_repository,
            booking_repository=self.repository,
        )

    # Helpers

    @staticmethod
    def _require_member(user: User, action: str) -> None:
        if not user.is_member:
            raise ForbiddenException(f"Only members can {action}", code="MEMBER_REQUIRED")

    @staticmethod
    def _constraint_name(integrity_error: IntegrityError) -> str:
        """Best-effort name of the violated constraint (PostgreSQL diag or SQLite text)."""
        orig = getattr(integrity_error, "orig", None)
        diag = getattr(orig, "diag", None)
        name = getattr(diag, "constraint_name", "") if diag is not None else ""
        if name:
            return str(name)

        text = str(orig or integrity_error)
        for known in (
            UQ_MEMBER_CLASS_OCCURRENCE,
            UQ_TRAINER_SLOT,
            UQ_MEMBER_SLOT,
            EX_TRAINER_OVERLAP,
            EX_MEMBER_OVERLAP,
        ):
            if known in text:
                return known
        # SQLite reports columns, not index names
        if "bookings.group_class_id" in text:
            return UQ_MEMBER_CLASS_OCCURRENCE
        if "bookings.trainer_id" in text:
            return UQ_TRAINER_SLOT
        if "bookings.user_id" in text and "bookings.start_time" in text:
            return UQ_MEMBER_SLOT
        return ""

    def _resolve_personal_conflict(
        self, integrity_error: IntegrityError, details: dict
    ) -> BookingConflictException:
        constraint = self._constraint_name(integrity_error)
        if constraint in (UQ_MEMBER_SLOT, EX_MEMBER_OVERLAP):
            return UserDoubleBookedException(details)
        if constraint in (UQ_TRAINER_SLOT, EX_TRAINER_OVERLAP):
            return TrainerUnavailableException(details)
        return BookingConflictException(details=details)

    # Group classes

    @BaseService.measure_operation("create_group_class_booking")
    def create_group_class_booking(
        self,
        user: User,
        class_id: str,
        class_date: Union[str, date],
        now: Optional[datetime] = None,
    ) -> GroupClassBooking:
        """
        Book a seat in one occurrence of a group class.

        Args:
            user: Requesting member
            class_id: Group class ID
            class_date: Occurrence day (``YYYY-MM-DD`` or date)
            now: Clock override for tests

        Returns:
            The confirmed booking

        Raises:
            ForbiddenException: Requester is not a member
            NotFoundException: Unknown or unapproved class
            ValidationException: Malformed, past, or unscheduled date
            DuplicateBookingException: Member already holds a seat in this occurrence
            ClassFullException: No seats left
        """
        self._require_member(user, "book classes")
        now = now or utc_now()
        if isinstance(class_date, str):
            day = parse_date_param(class_date, "class_date")
        else:
            day = class_date
        booking_type = BookingType.GROUP_CLASS.value

        try:
            with self.transaction():
                group_class = self.group_class_repository.get_for_update(class_id)
                if group_class is None or not group_class.is_approved:
                    raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")

                if not group_class.runs_on(day):
                    raise ValidationException(
                        "This class is not scheduled on the selected date",
                        code="CLASS_NOT_SCHEDULED",
                        details={"class_id": class_id, "class_date": day.isoformat()},
                    )
                if group_class.occurrence_start(day) <= now:
                    raise ValidationException(
                        "Cannot book a class that has already started",
                        code="CLASS_IN_PAST",
                        details={"class_date": day.isoformat()},
                    )

                if self.repository.has_member_class_booking(user.id, class_id, day):
                    raise DuplicateBookingException(class_id, day.isoformat())

                occupancy = self.group_class_service.occupancy_for(group_class, day)
                if occupancy.booked >= occupancy.capacity:
                    raise ClassFullException(class_id, day.isoformat(), occupancy.capacity)

                booking = GroupClassBooking(
                    user_id=user.id,
                    group_class_id=class_id,
                    class_date=day,
                )
                try:
                    self.repository.insert(booking)
                except IntegrityError as exc:
                    self.logger.warning(
                        "Concurrent duplicate class booking for user %s: %s", user.id, exc
                    )
                    raise DuplicateBookingException(class_id, day.isoformat()) from exc

                self.notification_service.schedule_class_reminder(booking, group_class, now)
        except BookingConflictException as exc:
            prometheus_metrics.record_booking_outcome(booking_type, exc.code)
            raise

        prometheus_metrics.record_booking_outcome(booking_type, "confirmed")
        self.log_operation(
            "create_group_class_booking",
            booking_id=booking.id,
            user_id=user.id,
            class_id=class_id,
            class_date=day.isoformat(),
        )
        return booking

    # Personal training

    @BaseService.measure_operation("create_personal_training_booking")
    def create_personal_training_booking(
        self,
        user: User,
        trainer_id: str,
        start_time: datetime,
        end_time: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PersonalTrainingBooking:
        """
        Book a personal training session.

        Validation order: range, past start, trainer, member overlap, trainer overlap.

        Raises:
            ForbiddenException: Requester is not a member
            ValidationException: start >= end, or start in the past
            NotFoundException: Trainer missing or not offering personal training
            UserDoubleBookedException: Member already booked in an overlapping session
            TrainerUnavailableException: Trainer already booked in an overlapping session
        """
        self._require_member(user, "book personal training")
        now = now or utc_now()
        start = ensure_utc(start_time)
        end = ensure_utc(end_time)
        booking_type = BookingType.PERSONAL_TRAINING.value

        if start >= end:
            raise ValidationException(
                "End time must be after start time", code="INVALID_TIME_RANGE"
            )
        if start < now:
            raise ValidationException("Cannot book a session in the past", code="START_IN_PAST")

        trainer = self.user_repository.get_personal_trainer(trainer_id)
        if trainer is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")

        details = {
            "trainer_id": trainer_id,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
        }

        try:
            with self.transaction():
                if self.repository.find_member_overlap(user.id, start, end) is not None:
                    raise UserDoubleBookedException(details)
                if self.repository.find_trainer_overlap(trainer_id, start, end) is not None:
                    raise TrainerUnavailableException(details)

                booking = PersonalTrainingBooking(
                    user_id=user.id,
                    trainer_id=trainer_id,
                    start_time=start,
                    end_time=end,
                    notes=notes or "",
                )
                try:
                    self.repository.insert(booking)
                except IntegrityError as exc:
                    conflict = self._resolve_personal_conflict(exc, details)
                    self.logger.warning(
                        "Concurrent personal training conflict for user %s: %s",
                        user.id,
                        conflict.code,
                    )
                    raise conflict from exc
        except BookingConflictException as exc:
            prometheus_metrics.record_booking_outcome(booking_type, exc.code)
            raise

        prometheus_metrics.record_booking_outcome(booking_type, "confirmed")
        self.log_operation(
            "create_personal_training_booking",
            booking_id=booking.id,
            user_id=user.id,
            trainer_id=trainer_id,
        )
        return booking

    # Cancellation

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, booking_id: str, user: User, now: Optional[datetime] = None
    ) -> Booking:
        """
        Cancel a confirmed, not yet started booking.

        Raises:
            NotFoundException: Unknown booking
            ForbiddenException: Requester neither owns the booking nor is an admin
            ConflictException: Booking not confirmed, or already started
        """
        now = now or utc_now()

        with self.transaction():
            booking = self.repository.get_booking(booking_id)
            if booking is None:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
            if booking.user_id != user.id and not user.is_admin:
                raise ForbiddenException(
                    "You can only cancel your own bookings", code="NOT_BOOKING_OWNER"
                )
            if not booking.is_cancellable:
                raise ConflictException(
                    f"Booking is {booking.status} and cannot be cancelled",
                    code="BOOKING_NOT_CANCELLABLE",
                    details={"status": booking.status},
                )
            if booking.effective_start() <= now:
                raise ConflictException(
                    "Booking has already started and cannot be cancelled",
                    code="BOOKING_ALREADY_STARTED",
                )

            booking.cancel(now)
            self.db.flush()
            self.notification_service.cancel_booking_reminders(booking.id)

        self.log_operation(
            "cancel_booking",
            booking_id=booking.id,
            cancelled_by=user.id,
            booking_type=booking.type,
        )
        return booking

    # Reads

    @BaseService.measure_operation("get_member_bookings")
    def get_member_bookings(
        self,
        user: User,
        status: Optional[str] = None,
        upcoming: bool = False,
        limit: int = DEFAULT_QUERY_LIMIT,
        now: Optional[datetime] = None,
    ) -> List[Booking]:
        """Bookings of the requesting member. Non-members have none."""
        if not user.is_member:
            return []
        now = now or utc_now()
        return self.repository.get_member_bookings(
            user.id,
            status=status,
            upcoming_after=now if upcoming else None,
            limit=limit,
        )

    @BaseService.measure_operation("get_member_booking")
    def get_member_booking(self, user: User, booking_id: str) -> Booking:
        """One booking of the requesting member; other people's bookings read as missing."""
        booking = self.repository.get_booking(booking_id)
        if booking is None or booking.user_id != user.id:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    @BaseService.measure_operation("get_trainer_sessions")
    def get_trainer_sessions(
        self, user: User, upcoming: bool = False, now: Optional[datetime] = None
    ) -> List[PersonalTrainingBooking]:
        """Confirmed personal training sessions led by the requesting trainer."""
        if not user.is_trainer:
            raise ForbiddenException(
                "Only trainers can view their sessions", code="TRAINER_REQUIRED"
            )
        now = now or utc_now()
        return self.repository.get_trainer_sessions(
            user.id, upcoming_after=now if upcoming else None
        )
