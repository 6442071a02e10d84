# backend/fitclub/routes/v1/memberships.py
"""
Membership routes - API v1

Endpoints:
    GET /packages - Package catalog
    GET /current - Current membership (null when none)
    GET /history - All memberships of the member, flagged current or not
    GET /payments - Payments of the member
    POST /subscribe - Start a membership and pay for it
    POST /change-package - Schedule a package for the next period
    POST /cancel - Turn off renewal
    POST /reactivate - Undo a cancellation
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies import get_current_active_user, get_membership_service
from ...core.exceptions import DomainException
from ...core.timezone_utils import utc_now
from ...models.user import User
from ...schemas.membership import (
    ChangePackageResponse,
    MembershipActionResponse,
    MembershipHistoryEntry,
    MembershipPackageResponse,
    MembershipResponse,
    PackageSelection,
    PaymentResponse,
    SubscribeResponse,
)
from ...services.membership_service import MembershipService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["memberships-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# Reads


@router.get("/packages", response_model=List[MembershipPackageResponse])
async def list_packages(
    service: MembershipService = Depends(get_membership_service),
) -> List[MembershipPackageResponse]:
    packages = await asyncio.to_thread(service.list_packages)
    return [MembershipPackageResponse.model_validate(package) for package in packages]


@router.get("/current", response_model=Optional[MembershipResponse])
async def get_current_membership(
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> Optional[MembershipResponse]:
    try:
        membership = await asyncio.to_thread(service.get_current_membership, current_user)
        if membership is None:
            return None
        return MembershipResponse.model_validate(membership)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/history", response_model=List[MembershipHistoryEntry])
async def get_membership_history(
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> List[MembershipHistoryEntry]:
    try:
        now = utc_now()
        memberships = await asyncio.to_thread(service.get_membership_history, current_user)
        return [
            MembershipHistoryEntry.from_membership(membership, now) for membership in memberships
        ]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/payments", response_model=List[PaymentResponse])
async def get_payments(
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> List[PaymentResponse]:
    try:
        payments = await asyncio.to_thread(service.get_payments, current_user)
        return [PaymentResponse.model_validate(payment) for payment in payments]
    except DomainException as e:
        handle_domain_exception(e)


# Transitions


@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Membership already exists"}},
)
async def subscribe(
    payload: PackageSelection = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> SubscribeResponse:
    """Subscribe to a package; the payment is recorded as completed."""
    try:
        membership, payment = await asyncio.to_thread(
            service.subscribe, current_user, payload.package_id
        )
        return SubscribeResponse(
            message="Subscription successful",
            membership=MembershipResponse.model_validate(membership),
            payment=PaymentResponse.model_validate(payment),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/change-package", response_model=ChangePackageResponse)
async def change_package(
    payload: PackageSelection = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> ChangePackageResponse:
    """The new package applies from the end of the current period."""
    try:
        membership = await asyncio.to_thread(
            service.change_package, current_user, payload.package_id
        )
        return ChangePackageResponse(
            message="Package change scheduled for the next billing period",
            membership=MembershipResponse.model_validate(membership),
            effective_date=membership.end_date,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/cancel", response_model=MembershipActionResponse)
async def cancel_membership(
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    try:
        membership = await asyncio.to_thread(service.cancel_membership, current_user)
        return MembershipActionResponse(
            message="Membership cancelled. It stays active until the end of the period.",
            membership=MembershipResponse.model_validate(membership),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/reactivate", response_model=MembershipActionResponse)
async def reactivate_membership(
    current_user: User = Depends(get_current_active_user),
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    try:
        membership = await asyncio.to_thread(service.reactivate_membership, current_user)
        return MembershipActionResponse(
            message="Membership reactivated",
            membership=MembershipResponse.model_validate(membership),
        )
    except DomainException as e:
        handle_domain_exception(e)
