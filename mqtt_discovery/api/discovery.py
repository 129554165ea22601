"""
Discovery endpoints: run scans, manage background discovery, list components.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..components import ComponentType
from ..discovery import DiscoveryController, get_discovery_controller
from ..topic import WILDCARD

logger = logging.getLogger("mqtt_discovery.api.discovery")

router = APIRouter(prefix="/discovery", tags=["Discovery"])


# --- Request/Response Models ---


class ScanRequest(BaseModel):
    """Request to run a time limited discovery."""
    object_id: str = WILDCARD
    node_id: str = ""
    duration: Optional[float] = Field(default=None, gt=0)


class BackgroundRequest(BaseModel):
    """Request to start a background discovery."""
    object_id: str = WILDCARD
    node_id: str = ""


class DiscoveryResponse(BaseModel):
    """Outcome of a discovery run."""
    status: str
    error: Optional[str] = None
    components: int = 0


class ComponentInfo(BaseModel):
    """Discovered component."""
    uid: str
    name: str
    type: str
    topic: str
    unique_id: Optional[str] = None
    availability_topic: Optional[str] = None
    device: Optional[dict[str, Any]] = None
    channels: dict[str, dict[str, Any]] = {}


# --- Endpoints ---


def _controller() -> DiscoveryController:
    controller = get_discovery_controller()
    if controller is None:
        raise HTTPException(503, "Discovery not available (no broker connection)")
    return controller


@router.get("/components", response_model=list[ComponentInfo])
async def list_components(type: Optional[str] = None):
    """
    List discovered components.

    Optionally filter by component kind (switch, sensor, light, etc.)
    """
    controller = _controller()
    component_type = None
    if type:
        try:
            component_type = ComponentType(type)
        except ValueError:
            raise HTTPException(400, f"Invalid component type: {type}")

    return [ComponentInfo(**c.to_dict()) for c in controller.list_components(component_type)]


@router.get("/components/{uid}", response_model=ComponentInfo)
async def get_component(uid: str):
    """Get details of a specific component."""
    component = _controller().registry.get(uid)
    if not component:
        raise HTTPException(404, f"Component not found: {uid}")
    return ComponentInfo(**component.to_dict())


@router.post("/scan", response_model=DiscoveryResponse)
async def scan(request: ScanRequest):
    """Run a time limited discovery and wait for it to finish."""
    controller = _controller()
    try:
        result = await controller.discover(
            object_id=request.object_id,
            node_id=request.node_id,
            duration=request.duration,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))
    return DiscoveryResponse(
        status=result.status.value,
        error=str(result.error) if result.error else None,
        components=len(controller.registry),
    )


@router.post("/background/start", response_model=DiscoveryResponse)
async def start_background(request: BackgroundRequest):
    """Start listening for component announcements until stopped."""
    controller = _controller()
    if controller.is_background_running:
        raise HTTPException(409, "Background discovery already running")

    result = await controller.start_background(
        object_id=request.object_id,
        node_id=request.node_id,
    )
    return DiscoveryResponse(
        status=result.status.value,
        error=str(result.error) if result.error else None,
        components=len(controller.registry),
    )


@router.post("/background/stop")
async def stop_background():
    """Stop the background discovery."""
    stopped = _controller().stop_background()
    return {"stopped": stopped}
