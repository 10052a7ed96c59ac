"""Structured Logging — JSON formatter, setup, and per-request access logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (method, path, status_code, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development
    - Request logging never alters the response
    - request.state.started_at marks request entry (audit durations)

Design Decisions:
    - JSONFormatter on stdlib logging: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import json
import logging
import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

EXTRA_FIELDS = (
    "method", "path", "status_code", "duration_ms", "error_code",
    "entity", "entity_id", "client_ip",
)

access_logger = logging.getLogger("inkpost.access")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access log line per request: method, path, status, duration."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request.state.started_at = started
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        access_logger.log(
            level,
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
