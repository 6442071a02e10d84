# backend/fitclub/routes/v1/classes.py
"""
Group class routes - API v1

Endpoints:
    GET / - Approved classes
    GET /{class_id}/availability/{class_date} - Occupancy of one occurrence
    POST /{class_id}/book - Book a seat in one occurrence
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from ...api.dependencies import (
    get_booking_service,
    get_current_active_user,
    get_group_class_service,
)
from ...core.exceptions import DomainException
from ...core.timezone_utils import utc_now
from ...models.user import User
from ...schemas.booking import BookingResponse, GroupClassBookingCreate
from ...schemas.group_class import ClassOccupancyResponse, GroupClassResponse
from ...services.booking_service import BookingService
from ...services.group_class_service import GroupClassService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["classes-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[GroupClassResponse])
async def list_classes(
    service: GroupClassService = Depends(get_group_class_service),
) -> List[GroupClassResponse]:
    classes = await asyncio.to_thread(service.list_classes)
    return [GroupClassResponse.model_validate(group_class) for group_class in classes]


@router.get(
    "/{class_id}/availability/{class_date}",
    response_model=ClassOccupancyResponse,
    responses={400: {"description": "Invalid date"}, 404: {"description": "Class not found"}},
)
async def get_class_availability(
    class_id: str = Path(..., description="Group class ID"),
    class_date: str = Path(..., description="Occurrence day in YYYY-MM-DD format"),
    service: GroupClassService = Depends(get_group_class_service),
) -> ClassOccupancyResponse:
    """Booked and free seats for one class occurrence."""
    try:
        occupancy = await asyncio.to_thread(service.get_class_occupancy, class_id, class_date)
        return ClassOccupancyResponse(**occupancy)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{class_id}/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid date, duplicate booking or class full"},
        403: {"description": "Only members can book"},
        404: {"description": "Class not found"},
    },
)
async def book_class(
    class_id: str = Path(..., description="Group class ID"),
    payload: GroupClassBookingCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        now = utc_now()
        booking = await asyncio.to_thread(
            booking_service.create_group_class_booking,
            current_user,
            class_id,
            payload.class_date,
            now,
        )
        return BookingResponse.from_booking(booking, now)
    except DomainException as e:
        handle_domain_exception(e)
