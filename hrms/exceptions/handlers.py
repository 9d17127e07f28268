# hrms/exceptions/handlers.py
"""
Boundary handlers. Every error body has the shape {"error": <message>}.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from hrms.core import tracing
from hrms.core.results import ErrorKind
from hrms.exceptions.errors import APIError, StorageError

STATUS_BY_KIND = {
    ErrorKind.DUPLICATE_RESOURCE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CREDENTIAL_MISSING: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.PRINCIPAL_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_403_FORBIDDEN,
    ErrorKind.CREDENTIAL_EXPIRED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
}


def get_safe_headers(request: Request) -> dict:
    """Extract and mask sensitive headers for logging"""
    headers = request.headers
    return {
        "user_agent": headers.get("user-agent", "unknown"),
        "authorization": (headers.get("authorization", "")[:10] + "...") if headers.get("authorization") else "none",
    }


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    tracing.warning(
        f"HTTP {status_code}: {exc.message}",
        kind=exc.kind.value,
        path=request.url.path,
        ip=get_remote_address(request),
    )
    return error_response(status_code, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = first_validation_message(exc)
    tracing.warning(
        f"Validation error: {len(exc.errors())} errors",
        url=str(request.url),
        ip=get_remote_address(request),
        first=message,
        **get_safe_headers(request)
    )
    return error_response(status.HTTP_400_BAD_REQUEST, message)


def make_storage_error_handler(expose_details: bool):
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        tracing.error(
            f"Storage failure: {exc}",
            url=str(request.url),
            ip=get_remote_address(request),
            type=type(exc.original).__name__ if exc.original else type(exc).__name__,
        )
        if expose_details:
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", details=str(exc))
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return storage_error_handler


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    tracing.warning(
        f"HTTP {exc.status_code}: {exc.detail}",
        url=str(request.url),
        ip=get_remote_address(request),
    )
    if exc.status_code == status.HTTP_404_NOT_FOUND and request.url.path.startswith("/api"):
        message = "API endpoint not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI, expose_details: bool = False) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StorageError, make_storage_error_handler(expose_details))
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)
