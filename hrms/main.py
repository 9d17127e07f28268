# hrms/main.py - Application factory
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from hrms import __version__
from hrms.api.endpoints import audit, auth, employees, health, teams
from hrms.auth.dependencies import enforce_rate_limit
from hrms.core import tracing
from hrms.core.config import Settings
from hrms.core.context import build_context
from hrms.exceptions.handlers import register_exception_handlers
from hrms.middleware.access_log import AccessLogMiddleware
from hrms.middleware.cors import setup_cors_middleware
from hrms.middleware.monitoring import MonitoringMiddleware
from hrms.middleware.security import SecurityHeadersMiddleware


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a fully wired application.

    Settings, the database, the token service and the password hasher are
    constructed once here and reach request handlers through app.state.context.
    """
    settings = settings or Settings()
    context = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        tracing.setup_structured_logging(settings)
        tracing.info("HRMS API startup initiated")

        if settings.CREATE_TABLES_ON_STARTUP:
            await context.database.create_all()

        tracing.info(f"Environment: {settings.ENVIRONMENT}")
        tracing.info(f"Rate Limiting: {'Enabled' if settings.RATE_LIMIT_ENABLED else 'Disabled'}")
        tracing.info(f"CORS Origins: {len(settings.cors_origins_list)} configured")
        tracing.info(f"HRMS API v{__version__} startup complete")

        yield

        tracing.info("HRMS API shutdown initiated")
        await context.database.dispose()
        tracing.info("HRMS API shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant HR management: organisations, employees, teams and an audit trail",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )
    app.state.context = context

    # =========================================================================
    # MIDDLEWARE (last added runs first)
    # =========================================================================

    setup_cors_middleware(app, settings)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=not settings.is_development)
    app.add_middleware(MonitoringMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(tracing.TracingMiddleware)

    register_exception_handlers(app, expose_details=settings.is_development)

    # =========================================================================
    # ROUTES
    # =========================================================================

    # One per-IP request budget shared by every /api route
    api_dependencies = [Depends(enforce_rate_limit)]

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"], dependencies=api_dependencies)
    app.include_router(employees.router, prefix="/api/employees", tags=["Employees"], dependencies=api_dependencies)
    app.include_router(teams.router, prefix="/api/teams", tags=["Teams"], dependencies=api_dependencies)
    app.include_router(audit.router, prefix="/api/audit", tags=["Audit"], dependencies=api_dependencies)
    app.include_router(health.router, prefix="/api", tags=["System"], dependencies=api_dependencies)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": settings.APP_NAME, "version": settings.APP_VERSION, "health": "/api/health"}

    return app
