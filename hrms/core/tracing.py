# hrms/core/tracing.py - Structured logging with per-request trace context

import os
import socket
import traceback
import sys
import json
import random
from datetime import datetime, timezone
from typing import Optional
from loguru import logger
from contextvars import ContextVar

from hrms.core.config import Settings

SERVICE_NAME = "hrms-api"
TRACE_HEADER = "x-trace-id"

# Context variables for trace propagation across awaits
_trace_id_context: ContextVar[str] = ContextVar('trace_id', default='no-trace')
_span_id_context: ContextVar[str] = ContextVar('span_id', default='no-span')


def generate_trace_id() -> str:
    """Generate a 128-bit trace ID as 32-character hex string"""
    return f"{random.getrandbits(128):032x}"


def generate_span_id() -> str:
    """Generate a 64-bit span ID as 16-character hex string"""
    return f"{random.getrandbits(64):016x}"


class TracingMiddleware:
    """
    Pure ASGI middleware that gives every HTTP request a trace id.

    An incoming X-Trace-ID header is honoured; otherwise a new id is generated.
    The id is echoed back in the X-Trace-ID response header.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = None
        for name, value in scope.get("headers", []):
            if name.decode("latin-1").lower() == TRACE_HEADER:
                incoming = value.decode("latin-1")
                break

        trace_id = incoming or generate_trace_id()
        trace_token = _trace_id_context.set(trace_id)
        span_token = _span_id_context.set(generate_span_id())

        async def send_with_trace(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-trace-id", trace_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace)
        finally:
            _trace_id_context.reset(trace_token)
            _span_id_context.reset(span_token)


def format_stack_trace(exception_info) -> Optional[str]:
    """Format exception stack trace for logging"""
    if not exception_info:
        return None

    try:
        if exception_info.traceback:
            return ''.join(traceback.format_exception(
                exception_info.type,
                exception_info.value,
                exception_info.traceback
            ))
        return str(exception_info.value)
    except Exception:
        return "Error formatting stack trace"


def setup_structured_logging(settings: Settings) -> None:
    """Configure loguru sinks: JSON lines or coloured human-readable output"""
    logger.remove()

    hostname = socket.gethostname()
    pid = os.getpid()
    environment = settings.ENVIRONMENT

    if settings.should_use_json_logging:
        def json_sink(message):
            record = message.record

            trace_id = record["extra"].get("trace_id") or _trace_id_context.get()
            span_id = record["extra"].get("span_id") or _span_id_context.get()

            log_entry = {
                "@timestamp": datetime.now(timezone.utc).isoformat(),
                "level": record["level"].name,
                "message": record["message"],
                "service": {
                    "name": SERVICE_NAME,
                    "version": settings.APP_VERSION,
                    "environment": environment,
                },
                "host": {"hostname": hostname},
                "process": {"pid": pid},
                "log": {
                    "origin": {
                        "file": {"name": record["file"].name, "line": record["line"]},
                        "function": record["function"]
                    },
                    "logger": record["name"]
                },
                "trace": {"id": trace_id, "span_id": span_id},
            }

            extra = {k: v for k, v in record["extra"].items()
                     if k not in ("trace_id", "span_id") and not k.startswith("_")}
            if extra:
                log_entry["custom"] = extra

            if record["exception"]:
                log_entry["error"] = {
                    "type": record["exception"].type.__name__ if record["exception"].type else "UnknownError",
                    "message": str(record["exception"].value),
                    "stack_trace": format_stack_trace(record["exception"]),
                }

            sys.stderr.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
            sys.stderr.flush()

        logger.add(json_sink, level=settings.LOG_LEVEL, catch=True)
    else:
        def format_with_trace(record):
            trace_id = _trace_id_context.get()
            trace_info = f" [trace:{trace_id[:8]}]" if trace_id != "no-trace" else ""
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
                "<cyan>{name}:{function}:{line}</cyan>" + trace_info + " - <level>{message}</level>\n{exception}"
            )

        logger.add(
            sys.stderr,
            format=format_with_trace,
            level=settings.LOG_LEVEL,
            colorize=True,
            catch=True
        )


def get_current_trace_span_ids() -> tuple[str, str]:
    """Get current trace_id and span_id from the request context"""
    return _trace_id_context.get(), _span_id_context.get()


def log_with_trace(level: str, message: str, **kwargs):
    """Log through loguru with the current trace context bound"""
    trace_id, span_id = get_current_trace_span_ids()
    bound = logger.bind(trace_id=trace_id, span_id=span_id, **kwargs)
    getattr(bound, level.lower())(message)


# Convenience functions
def info(message: str, **kwargs):
    log_with_trace("info", message, **kwargs)


def debug(message: str, **kwargs):
    log_with_trace("debug", message, **kwargs)


def warning(message: str, **kwargs):
    log_with_trace("warning", message, **kwargs)


def error(message: str, **kwargs):
    log_with_trace("error", message, **kwargs)


__all__ = [
    'TracingMiddleware', 'setup_structured_logging', 'get_current_trace_span_ids',
    'log_with_trace',
    'info', 'debug', 'warning', 'error'
]
