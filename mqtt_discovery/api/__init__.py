"""
API routers for MQTT discovery.
"""

from fastapi import APIRouter

from .discovery import router as discovery_router
from .health import router as health_router

# Main router that aggregates all sub-routers
router = APIRouter()

router.include_router(health_router)
router.include_router(discovery_router)
