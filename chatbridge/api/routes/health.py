"""
Health Check Routes - System health and readiness endpoints.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from chatbridge import __version__
from chatbridge.core.exceptions import ConfigurationError
from chatbridge.core.logging_config import get_logger
from chatbridge.database.connection import DatabaseConnection, get_database
from chatbridge.models.chat import HealthResponse
from chatbridge.services.chat_service import get_chat_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


def check_upstream() -> bool:
    """True if the chat service is configured and OpenWebUI answers."""
    try:
        return get_chat_service().check_upstream()
    except ConfigurationError as e:
        logger.warning(f"Upstream check skipped: {e.message}")
        return False


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
def health_check() -> HealthResponse:
    """Liveness only: the API process is up and responding."""
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
)
def readiness_check(
    db: DatabaseConnection = Depends(get_database),
    upstream_ok: bool = Depends(check_upstream),
) -> HealthResponse:
    """
    Check the users database and the OpenWebUI connection.

    Reports "degraded" rather than failing when a dependency is down.
    """
    checks = {
        "database": db.check_connection(),
        "openwebui": upstream_ok,
    }
    status = "ready" if all(checks.values()) else "degraded"
    logger.debug(f"Readiness check: {status} {checks}")

    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.utcnow(),
        checks=checks,
    )
