# backend/fitclub/main.py
"""
FitClub API application.

Mounts the versioned booking and membership routes under ``/api/v1`` and the
unversioned infrastructure routes (``/health``, ``/metrics``) at the root.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.constants import API_VERSION, BRAND_NAME
from .routes import health, prometheus
from .routes.v1 import (
    admin as admin_v1,
    classes as classes_v1,
    memberships as memberships_v1,
    profile as profile_v1,
    trainers as trainers_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        "Personal training window %02d:00-%02d:00 UTC, %d minute slots",
        settings.slot_day_start_hour,
        settings.slot_day_end_hour,
        settings.slot_length_minutes,
    )
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=f"{BRAND_NAME} API",
    description="Class and personal training bookings, availability and memberships",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
# Register unified error envelope handlers
from .errors import register_error_handlers  # noqa: E402

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_origins)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# /trainers/my-bookings is declared before /trainers/{trainer_id}/... inside the router
api_v1.include_router(trainers_v1.router, prefix="/trainers")
api_v1.include_router(classes_v1.router, prefix="/classes")
api_v1.include_router(profile_v1.router, prefix="/user/profile")
api_v1.include_router(memberships_v1.router, prefix="/memberships")
api_v1.include_router(admin_v1.router, prefix="/admin")

app.include_router(api_v1)
app.include_router(health.router)
app.include_router(prometheus.router)
