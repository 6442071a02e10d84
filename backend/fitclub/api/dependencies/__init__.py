# backend/fitclub/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_active_user, get_current_admin, get_current_user
from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_group_class_service,
    get_member_service,
    get_membership_service,
    get_notification_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_current_active_user",
    "get_current_admin",
    # Database
    "get_db",
    # Services
    "get_availability_service",
    "get_booking_service",
    "get_group_class_service",
    "get_member_service",
    "get_membership_service",
    "get_notification_service",
]
