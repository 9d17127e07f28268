# hrms/middleware/access_log.py
"""
Per-request access log.

Only metadata is logged; the body is never read here so downstream handlers
can consume it. Tenant and user ids come from request.state, set once the
principal has been resolved.
"""
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hrms.core import tracing


class AccessLogMiddleware(BaseHTTPMiddleware):
    EXCLUDE_PATHS = {"/api/health", "/metrics", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}

    def __init__(self, app, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or request.url.path in self.EXCLUDE_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        start_time = time.time()
        response_status = 500
        error_message: Optional[str] = None

        try:
            response = await call_next(request)
            response_status = response.status_code
            return response
        except Exception as e:
            error_message = str(e)
            raise
        finally:
            self._log(request, response_status, (time.time() - start_time) * 1000, error_message)

    @staticmethod
    def _log(request: Request, status_code: int, duration_ms: float, error: Optional[str]) -> None:
        fields = {
            "method": request.method,
            "path": request.url.path,
            "status": status_code,
            "duration_ms": round(duration_ms, 2),
            "ip": request.client.host if request.client else "unknown",
            "org_id": getattr(request.state, "org_id", None),
            "user_id": getattr(request.state, "user_id", None),
        }
        user_agent = request.headers.get("user-agent")
        if user_agent:
            fields["user_agent"] = user_agent[:200]
        if error:
            fields["error"] = error

        message = f"{request.method} {request.url.path} {status_code}"
        if status_code >= 500:
            tracing.error(message, **fields)
        elif status_code >= 400:
            tracing.warning(message, **fields)
        else:
            tracing.info(message, **fields)
