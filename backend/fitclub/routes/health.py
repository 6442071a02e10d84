# backend/fitclub/routes/health.py
"""
Health check endpoint for monitoring and load balancer probes.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..core.config import settings
from ..core.constants import API_VERSION, BRAND_NAME
from ..database import SessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {str(e)}")
        return False
    finally:
        db.close()


@router.get("/health")
def health_check() -> dict:
    """
    Health check endpoint.

    Returns basic health status including service info and environment.
    """
    database_ok = _database_ok()
    return {
        "status": "healthy" if database_ok else "degraded",
        "service": f"{BRAND_NAME.lower()}-api",
        "version": API_VERSION,
        "environment": settings.environment,
        "database": "ok" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
