# backend/fitclub/services/availability_service.py
"""
Personal training availability.

Builds the slot grid for one trainer and one day: the configured working
window split into fixed-width slots, each marked unavailable when it
overlaps a confirmed session of that trainer. Nothing is cached; the grid
is recomputed from live bookings on every request.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import SLOT_LABEL_FORMAT
from ..core.exceptions import NotFoundException
from ..core.timezone_utils import day_bounds, parse_date_param
from ..models.booking import PersonalTrainingBooking
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSlot:
    start_time: datetime
    end_time: datetime
    available: bool

    @property
    def display_time(self) -> str:
        return (
            f"{self.start_time.strftime(SLOT_LABEL_FORMAT)} - "
            f"{self.end_time.strftime(SLOT_LABEL_FORMAT)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "available": self.available,
            "display_time": self.display_time,
        }


def build_slot_grid(
    day: date,
    bookings: Sequence[PersonalTrainingBooking],
    *,
    start_hour: int,
    end_hour: int,
    slot_minutes: int,
) -> List[TimeSlot]:
    """
    Split ``[start_hour, end_hour)`` of ``day`` (UTC) into slots.

    A slot is unavailable when it overlaps any booking interval under the
    half-open rule ``slot_start < booking_end and slot_end > booking_start``.
    """
    window_start = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc) + timedelta(
        hours=start_hour
    )
    window_end = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc) + timedelta(
        hours=end_hour
    )
    step = timedelta(minutes=slot_minutes)

    slots: List[TimeSlot] = []
    slot_start = window_start
    while slot_start + step <= window_end:
        slot_end = slot_start + step
        taken = any(
            slot_start < booking.end_time and slot_end > booking.start_time for booking in bookings
        )
        slots.append(TimeSlot(start_time=slot_start, end_time=slot_end, available=not taken))
        slot_start = slot_end
    return slots


class AvailabilityService(BaseService):
    """Slot grid for personal trainers."""

    def __init__(
        self,
        db: Session,
        user_repository: Optional[UserRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )

    @BaseService.measure_operation("get_trainer_availability")
    def get_trainer_availability(self, trainer_id: str, date_str: str) -> Dict[str, Any]:
        """
        Slot grid for a trainer on one day.

        Args:
            trainer_id: Trainer user ID
            date_str: Day as ``YYYY-MM-DD``

        Returns:
            Dict with trainer identity, hourly rate and the ordered slots

        Raises:
            ValidationException: Malformed date
            NotFoundException: Unknown user, not a trainer, or no personal training
        """
        day = parse_date_param(date_str)

        trainer = self.user_repository.get_personal_trainer(trainer_id)
        if trainer is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")

        day_start, day_end = day_bounds(day)
        bookings = self.booking_repository.get_trainer_bookings_in_range(
            trainer_id, day_start, day_end
        )
        slots = build_slot_grid(
            day,
            bookings,
            start_hour=settings.slot_day_start_hour,
            end_hour=settings.slot_day_end_hour,
            slot_minutes=settings.slot_length_minutes,
        )
        self.logger.debug(
            "Built %d slots for trainer %s on %s (%d bookings)",
            len(slots),
            trainer_id,
            day,
            len(bookings),
        )

        return {
            "trainer_id": trainer.id,
            "trainer_name": trainer.full_name,
            "date": day,
            "hourly_rate": trainer.trainer_profile.hourly_rate,
            "slots": [slot.to_dict() for slot in slots],
        }

    @BaseService.measure_operation("list_personal_trainers")
    def list_personal_trainers(self) -> List[Dict[str, Any]]:
        """Trainers open for personal training, with their rates."""
        trainers = self.user_repository.list_personal_trainers()
        return [
            {
                "id": trainer.id,
                "full_name": trainer.full_name,
                "email": trainer.email,
                "trainer_type": trainer.trainer_profile.trainer_type,
                "hourly_rate": trainer.trainer_profile.hourly_rate,
                "bio": trainer.trainer_profile.bio,
            }
            for trainer in trainers
        ]
