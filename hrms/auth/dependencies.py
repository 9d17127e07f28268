# hrms/auth/dependencies.py - Request-scoped collaborators and principal resolution
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core import tracing
from hrms.core.context import AppContext
from hrms.core.results import ErrorKind, unwrap
from hrms.db.database import get_db
from hrms.db.gateway import Gateway
from hrms.exceptions.errors import APIError
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.identity import IdentityResolver, Principal

# auto_error=False so a missing header is reported with our own error body
bearer_scheme = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def enforce_rate_limit(request: Request, context: AppContext = Depends(get_context)) -> None:
    """Fixed budget of requests per client IP across every /api route"""
    limiter = context.limiter
    if not limiter.enabled:
        return
    client_ip = get_remote_address(request)
    if not limiter.limiter.hit(context.rate_limit, "api", client_ip):
        tracing.warning("Rate limit exceeded", ip=client_ip, path=request.url.path, limit=str(context.rate_limit))
        raise APIError(ErrorKind.RATE_LIMITED, "Too many requests from this IP, please try again later.")


async def get_gateway(db: AsyncSession = Depends(get_db)) -> Gateway:
    return Gateway(db)


def get_request_meta(request: Request) -> RequestMeta:
    """Origin IP and user agent of the caller, for the audit trail"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    return RequestMeta(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


def get_audit_recorder(gateway: Gateway = Depends(get_gateway)) -> AuditRecorder:
    return AuditRecorder(gateway)


async def get_current_principal(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        gateway: Gateway = Depends(get_gateway),
        context: AppContext = Depends(get_context),
) -> Principal:
    """
    Resolve the bearer credential to a principal, or fail the request.
    The principal's ids are attached to request.state for the access log.
    """
    token = credentials.credentials if credentials else None
    principal = unwrap(await IdentityResolver(gateway, context.tokens).resolve(token))

    request.state.user_id = principal.user_id
    request.state.org_id = principal.organisation_id
    return principal
