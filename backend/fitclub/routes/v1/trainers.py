# backend/fitclub/routes/v1/trainers.py
"""
Trainer routes - API v1

Endpoints:
    GET / - Trainers open for personal training
    GET /my-bookings - Sessions led by the requesting trainer
    GET /{trainer_id}/availability - Slot grid for one day
    POST /{trainer_id}/book - Book a personal training session
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ...api.dependencies import (
    get_availability_service,
    get_booking_service,
    get_current_active_user,
)
from ...core.exceptions import DomainException
from ...core.timezone_utils import utc_now
from ...models.user import User
from ...schemas.availability import TrainerAvailabilityResponse, TrainerSummary
from ...schemas.booking import (
    BookingResponse,
    PersonalTrainingBookingCreate,
    TrainerSessionResponse,
)
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["trainers-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[TrainerSummary])
async def list_trainers(
    service: AvailabilityService = Depends(get_availability_service),
) -> List[TrainerSummary]:
    """List trainers that offer personal training."""
    trainers = await asyncio.to_thread(service.list_personal_trainers)
    return [TrainerSummary(**trainer) for trainer in trainers]


@router.get("/my-bookings", response_model=List[TrainerSessionResponse])
async def get_my_sessions(
    upcoming: bool = Query(False, description="Only sessions that have not started yet"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[TrainerSessionResponse]:
    """Confirmed personal training sessions led by the requesting trainer."""
    try:
        now = utc_now()
        sessions = await asyncio.to_thread(
            booking_service.get_trainer_sessions, current_user, upcoming, now
        )
        return [TrainerSessionResponse.from_booking(session, now) for session in sessions]
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{trainer_id}/availability",
    response_model=TrainerAvailabilityResponse,
    responses={400: {"description": "Invalid date"}, 404: {"description": "Trainer not found"}},
)
async def get_trainer_availability(
    trainer_id: str = Path(..., description="Trainer user ID"),
    date: str = Query(..., description="Day in YYYY-MM-DD format", examples=["2026-10-20"]),
    service: AvailabilityService = Depends(get_availability_service),
) -> TrainerAvailabilityResponse:
    """Hourly slot grid of a trainer for one day."""
    try:
        grid = await asyncio.to_thread(service.get_trainer_availability, trainer_id, date)
        return TrainerAvailabilityResponse(**grid)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{trainer_id}/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid range or scheduling conflict"},
        403: {"description": "Only members can book"},
        404: {"description": "Trainer not found"},
    },
)
async def book_personal_training(
    trainer_id: str = Path(..., description="Trainer user ID"),
    payload: PersonalTrainingBookingCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Book a personal training session with a trainer."""
    try:
        now = utc_now()
        booking = await asyncio.to_thread(
            booking_service.create_personal_training_booking,
            current_user,
            trainer_id,
            payload.start_time,
            payload.end_time,
            payload.notes,
            now,
        )
        return BookingResponse.from_booking(booking, now)
    except DomainException as e:
        handle_domain_exception(e)
