# backend/fitclub/services/group_class_service.py
"""
Group class catalog, occupancy and admin management.

Occupancy is derived on demand from confirmed bookings for one occurrence
``(class_id, date)``; there is no stored seat counter. Only approved classes
are listed to members and bookable. Admins see every class, can move a class
between pending, approved and rejected, edit it, and delete it while no
booking references it.
"""

from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import GroupClassStatus
from ..core.exceptions import (
    ClassHasBookingsException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import parse_date_param
from ..models.group_class import GroupClass
from ..models.user import User
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.group_class_repository import GroupClassRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)

EDITABLE_CLASS_FIELDS = frozenset(
    {"name", "description", "trainer_user_id", "capacity", "schedule", "status"}
)
SCHEDULE_SLOT_KEYS = ("day_of_week", "start_time", "end_time")


@dataclass(frozen=True)
class Occupancy:
    capacity: int
    booked: int

    @property
    def available(self) -> int:
        return max(0, self.capacity - self.booked)

    @property
    def is_full(self) -> bool:
        return self.available <= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.capacity,
            "booked": self.booked,
            "available": self.available,
            "is_full": self.is_full,
        }


class GroupClassService(BaseService):
    """Catalog reads, occupancy and admin management of group classes."""

    def __init__(
        self,
        db: Session,
        group_class_repository: Optional[GroupClassRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.group_class_repository = (
            group_class_repository or RepositoryFactory.create_group_class_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    def get_approved_class(self, class_id: str) -> GroupClass:
        group_class = self.group_class_repository.get_by_id(class_id)
        if group_class is None or not group_class.is_approved:
            raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
        return group_class

    def occupancy_for(self, group_class: GroupClass, class_date: date) -> Occupancy:
        """Seats taken and left for one occurrence of an already loaded class."""
        booked = self.booking_repository.count_confirmed_for_occurrence(group_class.id, class_date)
        return Occupancy(capacity=int(group_class.capacity), booked=booked)

    @BaseService.measure_operation("list_classes")
    def list_classes(self) -> List[GroupClass]:
        return self.group_class_repository.list_approved()

    @BaseService.measure_operation("get_class_occupancy")
    def get_class_occupancy(self, class_id: str, date_str: str) -> Dict[str, Any]:
        """
        Occupancy of a class on a given date.

        The date is not checked against the weekly schedule; booking does that.

        Raises:
            ValidationException: Malformed date
            NotFoundException: Unknown or unapproved class
        """
        class_date = parse_date_param(date_str)
        group_class = self.get_approved_class(class_id)
        occupancy = self.occupancy_for(group_class, class_date)
        return {"class_id": group_class.id, "date": class_date, **occupancy.to_dict()}

    # Admin

    @staticmethod
    def _require_admin(actor: User, action: str) -> None:
        if not actor.is_admin:
            raise ForbiddenException(f"Only admins can {action}", code="ADMIN_REQUIRED")

    def _get_class(self, class_id: str) -> GroupClass:
        group_class = self.group_class_repository.get_by_id(class_id)
        if group_class is None:
            raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
        return group_class

    @BaseService.measure_operation("list_all_classes")
    def list_all_classes(self, actor: User) -> Dict[str, Any]:
        """
        Every class with its booking total, plus counts per status.

        Totals include cancelled bookings and past occurrences.

        Raises:
            ForbiddenException: Actor is not an admin
        """
        self._require_admin(actor, "list all classes")
        classes = self.group_class_repository.list_all()
        totals = self.booking_repository.count_by_class()

        statistics = {"total_classes": len(classes)}
        for status in GroupClassStatus:
            statistics[f"{status.value}_classes"] = sum(
                1 for group_class in classes if group_class.status == status.value
            )

        return {
            "classes": [
                {"group_class": group_class, "total_bookings": totals.get(group_class.id, 0)}
                for group_class in classes
            ],
            "statistics": statistics,
        }

    @BaseService.measure_operation("moderate_class")
    def set_class_status(self, class_id: str, status: str, actor: User) -> GroupClass:
        """
        Approve or reject a class.

        Raises:
            ForbiddenException: Actor is not an admin
            NotFoundException: Unknown class
            ValidationException: Target status is not approved/rejected
        """
        self._require_admin(actor, "moderate classes")
        if status not in (GroupClassStatus.APPROVED.value, GroupClassStatus.REJECTED.value):
            raise ValidationException(f"Unsupported class status: {status}", code="INVALID_STATUS")

        with self.transaction():
            group_class = self._get_class(class_id)
            group_class.status = status
            self.db.flush()

        self.log_operation("moderate_class", class_id=class_id, status=status, admin_id=actor.id)
        return group_class

    @BaseService.measure_operation("update_class")
    def update_class(self, class_id: str, changes: Dict[str, Any], actor: User) -> GroupClass:
        """
        Edit a class template.

        ``changes`` holds only the fields to overwrite, any of name,
        description, trainer_user_id, capacity, schedule and status.
        Existing bookings are kept even when capacity or schedule shrink;
        occupancy then reports no free seats.

        Raises:
            ForbiddenException: Actor is not an admin
            NotFoundException: Unknown class or trainer
            ValidationException: Unknown field or status
        """
        self._require_admin(actor, "edit classes")
        unknown = set(changes) - EDITABLE_CLASS_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be edited: {', '.join(sorted(unknown))}", code="INVALID_FIELDS"
            )
        if "status" in changes and changes["status"] not in {s.value for s in GroupClassStatus}:
            raise ValidationException(
                f"Unsupported class status: {changes['status']}", code="INVALID_STATUS"
            )

        with self.transaction():
            group_class = self._get_class(class_id)
            trainer_user_id = changes.get("trainer_user_id")
            if trainer_user_id is not None:
                trainer = self.user_repository.get_by_id(trainer_user_id)
                if trainer is None or not trainer.is_trainer:
                    raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
            for field, value in changes.items():
                if field == "schedule":
                    value = [{key: slot[key] for key in SCHEDULE_SLOT_KEYS} for slot in value]
                setattr(group_class, field, value)
            self.db.flush()

        self.log_operation(
            "update_class", class_id=class_id, fields=sorted(changes), admin_id=actor.id
        )
        return group_class

    @BaseService.measure_operation("delete_class")
    def delete_class(self, class_id: str, actor: User) -> None:
        """
        Delete a class that was never booked.

        Raises:
            ForbiddenException: Actor is not an admin
            NotFoundException: Unknown class
            ClassHasBookingsException: Bookings of any status still reference it
        """
        self._require_admin(actor, "delete classes")

        with self.transaction():
            group_class = self._get_class(class_id)
            bookings = self.booking_repository.count_for_class(group_class.id)
            if bookings:
                raise ClassHasBookingsException(class_id=group_class.id, bookings=bookings)
            self.group_class_repository.delete(group_class.id)

        self.log_operation("delete_class", class_id=class_id, admin_id=actor.id)
