# hrms/api/endpoints/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from hrms.auth.dependencies import get_context
from hrms.core import tracing
from hrms.core.context import AppContext

router = APIRouter()


@router.get("/health")
async def health_check(context: AppContext = Depends(get_context)):
    """Liveness probe that also pings the database"""
    body = {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": context.settings.APP_NAME,
        "database": "connected",
    }
    try:
        await context.database.ping()
    except Exception as e:
        tracing.error("Health check database ping failed", error=str(e), type=type(e).__name__)
        body.update(status="ERROR", database="disconnected")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body
