"""
Health check endpoints.
"""

from fastapi import APIRouter

from ..discovery import get_discovery_controller

router = APIRouter(tags=["Health"])


@router.get("/ping")
async def ping():
    """Simple endpoint to verify server is running."""
    return {"status": "ok", "message": "pong"}


@router.get("/health")
async def health():
    """Broker and discovery status."""
    controller = get_discovery_controller()
    if controller is None:
        return {"status": "degraded", "discovery": None}

    return {
        "status": "ok",
        "discovery": {
            "thing_uid": controller.thing_uid,
            "base_topic": controller.base_topic,
            "background_running": controller.is_background_running,
            "active_sessions": controller.active_sessions,
            "components": len(controller.registry),
        },
    }
