"""
Community Forum Mini Program Client Application.

Startup entry point: configures logging, builds the DI container around the
host's UI collaborators and warms up the cloud hosting container.
"""

from __future__ import annotations

from community_core.gateway_models import CallRequest
from community_service_libs.error_handling import CallFailure
from community_service_libs.logging_utils import configure_service_logging, create_service_logger
from dishka import AsyncContainer

from services.miniapp_client.config import settings
from services.miniapp_client.protocols import GatewayClientProtocol

# Configure structured logging
configure_service_logging(
    settings.SERVICE_NAME,
    environment=settings.ENVIRONMENT.value,
    log_level=settings.LOG_LEVEL,
)
logger = create_service_logger("miniapp.app")

WARM_UP_REQUEST = CallRequest(path="/")


async def launch(container: AsyncContainer) -> bool:
    """Warm up the gateway once at startup; a failure is logged, never raised."""
    logger.info("Mini program client starting", environment=settings.ENVIRONMENT.value)
    gateway = await container.get(GatewayClientProtocol)
    try:
        result = await gateway.call(WARM_UP_REQUEST)
    except CallFailure as e:
        logger.error("Cloud hosting warm-up failed", error_code=e.error_code, error=e.message)
        return False

    logger.info("Cloud hosting warm-up completed", status_code=result.status_code)
    return True
