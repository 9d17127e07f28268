# hrms/middleware/cors.py
from typing import Callable, Iterable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from hrms.core import tracing
from hrms.core.config import Settings


class CORSPolicyMiddleware(BaseHTTPMiddleware):
    """
    Rejects browser requests whose Origin is not allow-listed.
    Requests without an Origin header (curl, server to server) pass through.
    """

    def __init__(self, app, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = set(allowed_origins)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if origin and origin not in self.allowed_origins:
            tracing.warning("CORS policy violation", origin=origin, path=request.url.path)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "CORS policy violation"},
            )
        return await call_next(request)


def setup_cors_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure the origin policy and CORS response headers.
    The policy check is added first so it sits inside CORSMiddleware.
    """
    allowed_origins = settings.cors_origins_list

    app.add_middleware(CORSPolicyMiddleware, allowed_origins=allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            "X-Trace-ID"
        ],
        expose_headers=[
            "X-Trace-ID",
        ],
        max_age=600,
    )

    tracing.info("CORS configured", origins=len(allowed_origins))
