# backend/fitclub/services/membership_service.py
"""
Membership Service

State machine for a member's subscription:

    (none) --subscribe--> active --cancel--> cancelled --reactivate--> active

A membership is current while its status is active or cancelled and
``end_date >= now``; after that it is implicitly expired. change-package
only records ``next_package_id`` for the next period. Rolling a period over
into the next package is not done here.
"""

from datetime import datetime
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import SIMULATED_PAYMENT_METHOD, SUBSCRIPTION_DESCRIPTION_TEMPLATE
from ..core.enums import MembershipStatus, PaymentStatus
from ..core.exceptions import (
    ForbiddenException,
    MembershipStateException,
    NotFoundException,
    RepositoryException,
)
from ..core.timezone_utils import add_months, utc_now
from ..models.membership import Membership, MembershipPackage
from ..models.payment import Payment
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.membership_repository import MembershipPackageRepository, MembershipRepository
from ..repositories.payment_repository import PaymentRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class MembershipService(BaseService):
    """Subscription lifecycle and the simulated payment written on subscribe."""

    def __init__(
        self,
        db: Session,
        repository: Optional[MembershipRepository] = None,
        package_repository: Optional[MembershipPackageRepository] = None,
        payment_repository: Optional[PaymentRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_membership_repository(db)
        self.package_repository = (
            package_repository or RepositoryFactory.create_membership_package_repository(db)
        )
        self.payment_repository = (
            payment_repository or RepositoryFactory.create_payment_repository(db)
        )

    @staticmethod
    def _require_member(user: User) -> None:
        if not user.is_member:
            raise ForbiddenException("Only members have memberships", code="MEMBER_REQUIRED")

    def _get_package(self, package_id: str) -> MembershipPackage:
        package = self.package_repository.get_by_id(package_id)
        if package is None:
            raise NotFoundException("Membership package not found", code="PACKAGE_NOT_FOUND")
        return package

    # Reads

    @BaseService.measure_operation("list_packages")
    def list_packages(self) -> List[MembershipPackage]:
        return self.package_repository.list_by_price()

    @BaseService.measure_operation("get_current_membership")
    def get_current_membership(
        self, user: User, now: Optional[datetime] = None
    ) -> Optional[Membership]:
        self._require_member(user)
        return self.repository.get_current(user.id, now or utc_now())

    @BaseService.measure_operation("get_membership_history")
    def get_membership_history(self, user: User) -> List[Membership]:
        self._require_member(user)
        return self.repository.get_history(user.id)

    @BaseService.measure_operation("get_payments")
    def get_payments(self, user: User) -> List[Payment]:
        self._require_member(user)
        return self.payment_repository.get_for_user(user.id)

    # Transitions

    @BaseService.measure_operation("subscribe")
    def subscribe(
        self, user: User, package_id: str, now: Optional[datetime] = None
    ) -> Tuple[Membership, Payment]:
        """
        Start a new membership period and record its payment.

        Raises:
            ForbiddenException: Requester is not a member
            NotFoundException: Unknown package
            MembershipStateException: A current membership already exists
        """
        self._require_member(user)
        now = now or utc_now()
        package = self._get_package(package_id)

        with self.transaction():
            if self.repository.get_current(user.id, now) is not None:
                raise MembershipStateException(
                    "You already have an active membership. Use change package instead.",
                    code="MEMBERSHIP_EXISTS",
                )

            expired = self.repository.expire_lapsed(user.id, now)
            if expired:
                self.logger.info("Marked %d lapsed membership(s) expired for %s", expired, user.id)

            try:
                membership = self.repository.create(
                    user_id=user.id,
                    package_id=package.id,
                    start_date=now,
                    end_date=add_months(now, settings.membership_period_months),
                    status=MembershipStatus.ACTIVE.value,
                    auto_renew=True,
                )
            except RepositoryException as exc:
                if isinstance(exc.__cause__, IntegrityError):
                    raise MembershipStateException(
                        "You already have an active membership. Use change package instead.",
                        code="MEMBERSHIP_EXISTS",
                    ) from exc
                raise

            payment = self.payment_repository.create(
                user_id=user.id,
                membership_id=membership.id,
                amount=package.price,
                status=PaymentStatus.COMPLETED.value,
                payment_method=SIMULATED_PAYMENT_METHOD,
                payment_date=now,
                description=SUBSCRIPTION_DESCRIPTION_TEMPLATE.format(package_name=package.name),
            )

        prometheus_metrics.record_membership_transition("subscribe")
        self.log_operation(
            "subscribe",
            user_id=user.id,
            membership_id=membership.id,
            package_id=package.id,
        )
        return membership, payment

    @BaseService.measure_operation("change_package")
    def change_package(
        self, user: User, package_id: str, now: Optional[datetime] = None
    ) -> Membership:
        """
        Schedule a different package for the next period.

        The current period and price stay as they are; ``next_package_id``
        is stored and the effective date is the current ``end_date``.

        Raises:
            ForbiddenException: Requester is not a member
            NotFoundException: Unknown package
            MembershipStateException: No current membership
        """
        self._require_member(user)
        now = now or utc_now()
        package = self._get_package(package_id)

        with self.transaction():
            membership = self.repository.get_current(user.id, now)
            if membership is None:
                raise MembershipStateException(
                    "You don't have an active membership. Subscribe first.",
                    code="NO_CURRENT_MEMBERSHIP",
                )
            membership.next_package_id = package.id
            membership.next_package = package
            self.db.flush()

        prometheus_metrics.record_membership_transition("change_package")
        self.log_operation(
            "change_package",
            user_id=user.id,
            membership_id=membership.id,
            next_package_id=package.id,
        )
        return membership

    @BaseService.measure_operation("cancel_membership")
    def cancel_membership(self, user: User, now: Optional[datetime] = None) -> Membership:
        """
        Turn off renewal; the membership stays usable until ``end_date``.

        Raises:
            ForbiddenException: Requester is not a member
            MembershipStateException: No current membership in status active
        """
        self._require_member(user)
        now = now or utc_now()

        with self.transaction():
            membership = self.repository.get_current(user.id, now)
            if membership is None or membership.status != MembershipStatus.ACTIVE.value:
                raise MembershipStateException(
                    "No active membership to cancel", code="NO_ACTIVE_MEMBERSHIP"
                )
            membership.cancel(now)
            membership.next_package = None
            self.db.flush()

        prometheus_metrics.record_membership_transition("cancel")
        self.log_operation("cancel_membership", user_id=user.id, membership_id=membership.id)
        return membership

    @BaseService.measure_operation("reactivate_membership")
    def reactivate_membership(self, user: User, now: Optional[datetime] = None) -> Membership:
        """
        Undo a cancellation before the period ends.

        Raises:
            ForbiddenException: Requester is not a member
            MembershipStateException: No current membership in status cancelled
        """
        self._require_member(user)
        now = now or utc_now()

        with self.transaction():
            membership = self.repository.get_current(user.id, now)
            if membership is None or membership.status != MembershipStatus.CANCELLED.value:
                raise MembershipStateException(
                    "No cancelled membership to reactivate", code="NO_CANCELLED_MEMBERSHIP"
                )
            membership.reactivate()
            self.db.flush()

        prometheus_metrics.record_membership_transition("reactivate")
        self.log_operation("reactivate_membership", user_id=user.id, membership_id=membership.id)
        return membership
