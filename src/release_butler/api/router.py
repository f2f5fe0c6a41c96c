"""Main API router aggregation."""

from fastapi import APIRouter

from .health import router as health_router
from .webhooks import router as webhooks_router

router = APIRouter()

# Include sub-routers
router.include_router(health_router)
router.include_router(webhooks_router)
