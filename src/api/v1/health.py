"""Health check endpoints."""

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.models.database import check_db_connection
from src.observability.logging import get_logger
from src.observability.metrics import metrics

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Liveness probe endpoint.

    Returns basic status - use this for container liveness checks.
    """
    return {"status": "ok"}


@router.get("/ready")
async def readiness_check():
    """
    Readiness probe endpoint.

    Checks connectivity to the database.
    Returns 503 if it is unreachable.
    """
    db_ok = await check_db_connection()
    if not db_ok:
        logger.error("Database health check failed")

    result = {
        "status": "ready" if db_ok else "not_ready",
        "dependencies": {"database": "ok" if db_ok else "error"},
    }

    if not db_ok:
        return JSONResponse(content=result, status_code=503)

    return result


@router.get("/metrics")
async def prometheus_metrics():
    """
    Prometheus metrics endpoint.

    Returns all metrics in Prometheus text format.
    """
    if not settings.METRICS_ENABLED:
        return Response(content="Metrics disabled", status_code=404)

    content = metrics.get_metrics()
    return Response(content=content, media_type="text/plain; charset=utf-8")
