"""
Liveness and readiness probes.

/healthz answers as long as the process serves requests. /readyz also needs
the database pool to run a query and reports pool usage alongside.
"""

import time

from fastapi import APIRouter, Depends

from memoreel.db.pool import DatabasePoolManager
from memoreel.dependencies import get_db
from memoreel.infrastructure.observability.logging import log_health_check

router = APIRouter()


@router.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "memoreel-backend"}


@router.get("/readyz")
async def readyz(db: DatabasePoolManager = Depends(get_db)):
    t0 = time.time()
    db_health = await db.health_check()
    latency_ms = round((time.time() - t0) * 1000, 1)

    check = {"ok": bool(db_health.get("healthy", False)), "latency_ms": latency_ms}
    for key in ("pool_stats", "warnings"):
        if key in db_health:
            check[key] = db_health[key]
    if not check["ok"]:
        check["error"] = db_health.get("error", "Database unhealthy")

    log_health_check("database", check["ok"], latency_ms, error=check.get("error"))
    return {"overall_ok": check["ok"], "checks": {"database": check}}
