# backend/fitclub/models/membership.py
"""
Membership models.

MembershipPackage is immutable catalog data. Membership is one subscription
period for one member. At most one membership per member is *current*:
status active or cancelled with ``end_date >= now``. Expiry is implied by
``end_date`` passing; the stored status is only moved to ``expired`` lazily,
right before a new subscription is created.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import CURRENT_MEMBERSHIP_STATUSES, MembershipStatus
from ..database import Base
from .types import UTCDateTime

UQ_CURRENT_MEMBERSHIP = "uq_memberships_user_current"

_CURRENT = text("status IN ('active', 'cancelled')")


class MembershipPackage(Base):
    """Catalog entry a member can subscribe to."""

    __tablename__ = "membership_packages"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(80), unique=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())

    __table_args__ = (CheckConstraint("price >= 0", name="check_package_price_non_negative"),)

    def __repr__(self) -> str:
        return f"<MembershipPackage {self.name} {self.price}>"


class Membership(Base):
    """
    One subscription period.

    Attributes:
        user_id: Member owning the period
        package_id: Package paid for this period
        start_date / end_date: Period bounds (UTC)
        status: active, cancelled or expired
        auto_renew: False once the member cancels
        next_package_id: Package requested via change-package; takes effect at end_date
        cancelled_at: When the member cancelled, cleared on reactivation
    """

    __tablename__ = "memberships"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    package_id = Column(String(26), ForeignKey("membership_packages.id"), nullable=False)
    start_date = Column(UTCDateTime, nullable=False)
    end_date = Column(UTCDateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=MembershipStatus.ACTIVE.value)
    auto_renew = Column(Boolean, nullable=False, default=True)
    next_package_id = Column(String(26), ForeignKey("membership_packages.id"), nullable=True)
    cancelled_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    user = relationship("User", back_populates="memberships", foreign_keys=[user_id])
    package = relationship("MembershipPackage", foreign_keys=[package_id], lazy="joined")
    next_package = relationship("MembershipPackage", foreign_keys=[next_package_id], lazy="joined")
    payments = relationship("Payment", back_populates="membership")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'cancelled', 'expired')", name="ck_memberships_status"
        ),
        CheckConstraint("start_date < end_date", name="check_membership_period_order"),
    )

    def __repr__(self) -> str:
        return f"<Membership {self.id}: user={self.user_id} status={self.status} ends={self.end_date}>"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.end_date < now

    def is_current(self, now: Optional[datetime] = None) -> bool:
        return self.status in CURRENT_MEMBERSHIP_STATUSES and not self.is_expired(now)

    def cancel(self, now: Optional[datetime] = None) -> None:
        """Turn off renewal. The period stays usable until end_date."""
        self.auto_renew = False
        self.status = MembershipStatus.CANCELLED.value
        self.cancelled_at = now or datetime.now(timezone.utc)
        self.next_package_id = None

    def reactivate(self) -> None:
        self.auto_renew = True
        self.status = MembershipStatus.ACTIVE.value
        self.cancelled_at = None

    def expire(self) -> None:
        self.status = MembershipStatus.EXPIRED.value


Index(
    UQ_CURRENT_MEMBERSHIP,
    Membership.user_id,
    unique=True,
    sqlite_where=_CURRENT,
    postgresql_where=_CURRENT,
)
