# backend/fitclub/routes/v1/profile.py
"""
Profile routes - API v1

Mounted under /api/v1/user/profile.

Endpoints:
    GET (root) - The caller with their current membership
    GET /bookings - List the member's bookings
    GET /bookings/{booking_id} - One booking of the member
    DELETE /bookings/{booking_id} - Cancel a booking
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ...api.dependencies import (
    get_booking_service,
    get_current_active_user,
    get_member_service,
)
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.enums import BookingStatus
from ...core.exceptions import DomainException
from ...core.timezone_utils import utc_now
from ...models.user import User
from ...schemas.booking import BookingResponse
from ...schemas.member import ProfileResponse
from ...services.booking_service import BookingService
from ...services.member_service import MemberService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_active_user),
    member_service: MemberService = Depends(get_member_service),
) -> ProfileResponse:
    """The caller's account; members also get their current membership, others null."""
    try:
        profile = await asyncio.to_thread(member_service.get_profile, current_user, utc_now())
        return ProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/bookings", response_model=List[BookingResponse])
async def list_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    upcoming: bool = Query(False, description="Only bookings that have not started yet"),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """
    Bookings of the requesting member, newest first.

    The status filter applies to the stored status; ended confirmed bookings
    are still reported as ``completed``. ``upcoming`` compares the session
    start (for classes, the scheduled start of the occurrence) with now.
    """
    try:
        now = utc_now()
        bookings = await asyncio.to_thread(
            booking_service.get_member_bookings,
            current_user,
            status_filter.value if status_filter else None,
            upcoming,
            limit,
            now,
        )
        return [BookingResponse.from_booking(booking, now) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def get_my_booking(
    booking_id: str = Path(..., description="Booking ID"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.get_member_booking, current_user, booking_id
        )
        return BookingResponse.from_booking(booking, utc_now())
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    responses={
        400: {"description": "Booking not cancellable"},
        403: {"description": "Not your booking"},
        404: {"description": "Booking not found"},
    },
)
async def cancel_booking(
    booking_id: str = Path(..., description="Booking ID"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Cancel a booking."""
    try:
        now = utc_now()
        booking = await asyncio.to_thread(
            booking_service.cancel_booking, booking_id, current_user, now
        )
        return BookingResponse.from_booking(booking, now)
    except DomainException as e:
        handle_domain_exception(e)
