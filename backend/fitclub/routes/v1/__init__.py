# backend/fitclub/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import admin, classes, memberships, profile, trainers

__all__ = [
    "admin",
    "classes",
    "memberships",
    "profile",
    "trainers",
]
