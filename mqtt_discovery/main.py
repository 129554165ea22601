"""
MQTT Discovery - HTTP service

FastAPI application exposing Home Assistant component discovery.
"""

# Load .env file FIRST, before any other imports
from pathlib import Path
from dotenv import load_dotenv
_env_root = Path(__file__).parent.parent
load_dotenv(_env_root / ".env")

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import router as api_router
from .backends import MQTTConnection
from .config import settings
from .discovery import DiscoveryController, set_discovery_controller

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("mqtt_discovery.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Connects to the broker on startup and tears discovery down on shutdown.
    """
    # --- Startup ---
    logger.info("MQTT discovery starting up...")

    connection = MQTTConnection(
        broker_host=settings.mqtt.host,
        broker_port=settings.mqtt.port,
        username=settings.mqtt.username,
        password=settings.mqtt.password,
        client_id=settings.mqtt.client_id,
        keepalive=settings.mqtt.keepalive,
    )
    controller = None
    try:
        await connection.connect()
        controller = DiscoveryController(connection)
        set_discovery_controller(controller)
    except Exception as e:
        logger.error("Discovery unavailable, broker connection failed: %s", e)

    if controller is not None and settings.discovery.background:
        result = await controller.start_background()
        if not result.ok:
            logger.error("Failed to start background discovery: %s", result.error)

    yield  # Application runs here

    # --- Shutdown ---
    logger.info("MQTT discovery shutting down...")

    if controller is not None:
        controller.shutdown()
        set_discovery_controller(None)

    await connection.disconnect()
    logger.info("MQTT discovery shutdown complete")


# Create the FastAPI application
app = FastAPI(
    title="MQTT Discovery",
    description="Home Assistant MQTT component discovery service.",
    version="0.1.0",
    lifespan=lifespan,
)

# Include API routers with /api/v1 prefix
app.include_router(api_router, prefix="/api/v1")
