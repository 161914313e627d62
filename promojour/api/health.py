"""
Liveness and readiness probes (no authentication).
"""
import time
from fastapi import APIRouter, Request
from sqlalchemy import text
from promojour import database
from promojour.utils import get_logger
from promojour.utils.campaign_lock import GLOBAL_CAMPAIGN_LOCKS

router = APIRouter(tags=["health"])
logger = get_logger(__name__)

SERVICE_NAME = "promojour-distribution"
VERSION = "1.0.0"


def _worker_state(request: Request) -> str:
    worker = getattr(request.app.state, "distribution_worker", None)
    return "running" if worker is not None and worker.is_running() else "disabled"


@router.get("/health", summary="Basic health check")
async def health_check(request: Request):
    """Cheap probe for load balancers."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": time.time(),
        "distribution_worker": _worker_state(request),
    }


@router.get("/health/detailed", summary="Detailed health check")
async def detailed_health_check(request: Request):
    """Database round trip plus the campaigns currently locked by a distribution pass."""
    checks = {}
    overall = "healthy"
    try:
        # Looked up at call time so a rebound session factory is honoured
        db = database.SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        checks["database"] = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        checks["database"] = f"unhealthy: {e}"
        overall = "degraded"

    checks["distribution_worker"] = _worker_state(request)
    checks["campaign_locks_held"] = sorted(
        campaign_id for campaign_id, held in GLOBAL_CAMPAIGN_LOCKS.snapshot().items() if held
    )
    return {
        "status": overall,
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": time.time(),
        "checks": checks,
    }
