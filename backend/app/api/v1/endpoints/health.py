"""
Health Check Endpoints

- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable, storage configured)
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Dict, Any
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import get_session_local, tables_ready
from app.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity and that the record tables exist"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            tables_ok = await tables_ready(session)

        return {
            "status": "healthy" if tables_ok else "degraded",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "tables_ready": tables_ok,
        }
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "tables_ready": False,
            "error": str(e),
        }


def check_storage() -> Dict[str, Any]:
    """Storage configuration (not connectivity)"""
    mode = settings.STORAGE_MODE.lower()
    if mode == "local":
        return {"status": "healthy", "provider": "local", "upload_dir": settings.UPLOAD_DIR}
    return {
        "status": "healthy" if settings.AWS_ACCESS_KEY_ID or mode == "s3" else "degraded",
        "provider": mode,
        "region": settings.AWS_REGION,
        "endpoint": settings.MINIO_ENDPOINT if mode == "minio" else None,
    }


@router.get("/live")
async def liveness_check():
    """Liveness probe - returns 200 while the process is alive"""
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat(),
        "app": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe - 503 when the database is unreachable"""
    checks = {
        "database": {"status": "skipped", "reason": "mock mode"} if settings.USE_MOCK_DATA else await check_database(),
        "storage": check_storage(),
    }
    healthy = all(check["status"] in ("healthy", "skipped") for check in checks.values())
    body = {
        "status": "ready" if healthy else "not_ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": checks,
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)
