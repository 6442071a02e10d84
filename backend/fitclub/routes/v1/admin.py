# backend/fitclub/routes/v1/admin.py
"""
Admin routes - API v1

Mounted under /api/v1/admin. Every endpoint requires role=admin.

Classes start out in whatever status they were created with; admins move
them between pending, approved and rejected. Only approved classes are
listed to members and bookable.

Endpoints:
    GET /classes - Every class with booking totals and status counts
    PUT /classes/{class_id}/approve - Approve a class
    PUT /classes/{class_id}/reject - Reject a class
    PUT /classes/{class_id} - Edit a class
    DELETE /classes/{class_id} - Delete a class nobody has booked
    GET /members - Members and trainers with directory statistics
    GET /members/{member_id} - One member with history and bookings
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from ...api.dependencies import get_current_admin, get_group_class_service, get_member_service
from ...core.enums import GroupClassStatus
from ...core.exceptions import DomainException
from ...core.timezone_utils import utc_now
from ...models.user import User
from ...schemas.group_class import (
    AdminClassListResponse,
    AdminClassResponse,
    ClassDeletedResponse,
    ClassStatistics,
    GroupClassResponse,
    GroupClassUpdate,
)
from ...schemas.member import MemberDetailResponse, MemberListResponse
from ...services.group_class_service import GroupClassService
from ...services.member_service import MemberService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# Classes


@router.get("/classes", response_model=AdminClassListResponse)
async def list_all_classes(
    admin: User = Depends(get_current_admin),
    service: GroupClassService = Depends(get_group_class_service),
) -> AdminClassListResponse:
    """All classes including pending and rejected, newest first."""
    try:
        overview = await asyncio.to_thread(service.list_all_classes, admin)
        return AdminClassListResponse(
            classes=[
                AdminClassResponse.model_validate(entry["group_class"]).model_copy(
                    update={"total_bookings": entry["total_bookings"]}
                )
                for entry in overview["classes"]
            ],
            statistics=ClassStatistics(**overview["statistics"]),
        )
    except DomainException as e:
        handle_domain_exception(e)


async def _moderate(
    service: GroupClassService, class_id: str, target: GroupClassStatus, admin: User
) -> GroupClassResponse:
    try:
        group_class = await asyncio.to_thread(
            service.set_class_status, class_id, target.value, admin
        )
        return GroupClassResponse.model_validate(group_class)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/classes/{class_id}/approve", response_model=GroupClassResponse)
async def approve_class(
    class_id: str = Path(..., description="Group class ID"),
    admin: User = Depends(get_current_admin),
    service: GroupClassService = Depends(get_group_class_service),
) -> GroupClassResponse:
    return await _moderate(service, class_id, GroupClassStatus.APPROVED, admin)


@router.put("/classes/{class_id}/reject", response_model=GroupClassResponse)
async def reject_class(
    class_id: str = Path(..., description="Group class ID"),
    admin: User = Depends(get_current_admin),
    service: GroupClassService = Depends(get_group_class_service),
) -> GroupClassResponse:
    return await _moderate(service, class_id, GroupClassStatus.REJECTED, admin)


@router.put(
    "/classes/{class_id}",
    response_model=GroupClassResponse,
    responses={404: {"description": "Class or trainer not found"}},
)
async def update_class(
    class_id: str = Path(..., description="Group class ID"),
    payload: GroupClassUpdate = Body(...),
    admin: User = Depends(get_current_admin),
    service: GroupClassService = Depends(get_group_class_service),
) -> GroupClassResponse:
    """Change only the fields sent; existing bookings are kept."""
    try:
        group_class = await asyncio.to_thread(
            service.update_class, class_id, payload.changes(), admin
        )
        return GroupClassResponse.model_validate(group_class)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/classes/{class_id}",
    response_model=ClassDeletedResponse,
    responses={
        400: {"description": "Class still has bookings"},
        404: {"description": "Class not found"},
    },
)
async def delete_class(
    class_id: str = Path(..., description="Group class ID"),
    admin: User = Depends(get_current_admin),
    service: GroupClassService = Depends(get_group_class_service),
) -> ClassDeletedResponse:
    try:
        await asyncio.to_thread(service.delete_class, class_id, admin)
        return ClassDeletedResponse(message="Class deleted", id=class_id)
    except DomainException as e:
        handle_domain_exception(e)


# Members


@router.get("/members", response_model=MemberListResponse)
async def list_members(
    admin: User = Depends(get_current_admin),
    service: MemberService = Depends(get_member_service),
) -> MemberListResponse:
    try:
        directory = await asyncio.to_thread(service.list_members, admin, utc_now())
        return MemberListResponse.from_directory(directory)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/members/{member_id}",
    response_model=MemberDetailResponse,
    responses={404: {"description": "Member not found"}},
)
async def get_member(
    member_id: str = Path(..., description="Member or trainer user ID"),
    admin: User = Depends(get_current_admin),
    service: MemberService = Depends(get_member_service),
) -> MemberDetailResponse:
    try:
        now = utc_now()
        detail = await asyncio.to_thread(service.get_member_detail, admin, member_id, now)
        return MemberDetailResponse.from_detail(detail, now)
    except DomainException as e:
        handle_domain_exception(e)
