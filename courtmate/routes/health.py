# courtmate/routes/health.py
"""
Health check endpoints with database pool monitoring.
"""

import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter

from courtmate.config import settings
from courtmate.db.pool import db_health_check

router = APIRouter()


def _configuration_issues() -> list[str]:
    issues = []
    if not settings.SUPABASE_DB_URL:
        issues.append("SUPABASE_DB_URL not set")
    if not settings.SUPABASE_URL:
        issues.append("SUPABASE_URL not set")

    config = settings.scheduling_config()
    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        issues.append(f"Unknown SCHEDULING_TIMEZONE {config.timezone!r}")
    if not config.day_window.is_valid():
        issues.append("SCHEDULING_DAY_START_HOUR must be before SCHEDULING_DAY_END_HOUR")
    if config.slot_duration_minutes <= 0 or config.step_minutes <= 0:
        issues.append("SCHEDULING_SLOT_MINUTES and SCHEDULING_STEP_MINUTES must be positive")
    return issues


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "courtmate-scheduling"}


@router.get("/readyz")
async def readyz():
    """Readiness check covering the database pool and configuration."""
    checks = {}
    overall_ok = True

    t0 = time.time()
    try:
        db_health = await db_health_check()
        is_healthy = bool(db_health.get("healthy", False))
        checks["database"] = {
            "ok": is_healthy,
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        if "pool_stats" in db_health:
            checks["database"]["pool_stats"] = db_health["pool_stats"]
        if not is_healthy:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")
        overall_ok = overall_ok and is_healthy
    except Exception as e:
        checks["database"] = {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        overall_ok = False

    config_issues = _configuration_issues()

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and not config_issues

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}


@router.get("/health/database")
async def database_health():
    """Detailed database pool health information."""
    return await db_health_check()
