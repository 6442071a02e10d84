# backend/fitclub/schemas/membership.py
"""Membership, package and payment schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.membership import Membership
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel


class PackageSelection(StrictRequestModel):
    """Body for subscribe and change-package."""

    package_id: str = Field(..., min_length=1, max_length=26)


class MembershipPackageResponse(StandardizedModel):
    id: str
    name: str
    price: Money
    description: Optional[str] = None


class MembershipResponse(StandardizedModel):
    id: str
    package: MembershipPackageResponse
    next_package: Optional[MembershipPackageResponse] = None
    start_date: datetime
    end_date: datetime
    status: str
    auto_renew: bool
    cancelled_at: Optional[datetime] = None


class MembershipHistoryEntry(MembershipResponse):
    """A past or present period; lapsed periods may still carry status active."""

    is_current: bool = Field(..., description="Active or cancelled and not yet ended")

    @classmethod
    def from_membership(cls, membership: Membership, now: datetime) -> "MembershipHistoryEntry":
        base = MembershipResponse.model_validate(membership)
        return cls(**dict(base), is_current=membership.is_current(now))


class PaymentResponse(StandardizedModel):
    id: str
    membership_id: Optional[str] = None
    amount: Money
    status: str
    payment_method: str
    payment_date: datetime
    description: Optional[str] = None


class SubscribeResponse(StandardizedModel):
    message: str
    membership: MembershipResponse
    payment: PaymentResponse


class MembershipActionResponse(StandardizedModel):
    message: str
    membership: MembershipResponse


class ChangePackageResponse(MembershipActionResponse):
    effective_date: datetime = Field(..., description="When the new package takes over")
