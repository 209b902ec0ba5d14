"""
Structured logging for the drivers caching API.

structlog sits on top of the stdlib logging module. Development gets a
plain console renderer, everything else one JSON object per line. The
request ID bound by RequestIDMiddleware rides along via contextvars, so
cache and store events logged deep in a request carry it too.
"""

import logging
import os
import sys
import time
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "caching_api"


def _tag_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = SERVICE_NAME
    return event_dict


def _renderers(development: bool) -> list[Processor]:
    if development:
        return [
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO", development: bool | None = None) -> None:
    """
    Configure structlog for the process.

    Args:
        level: stdlib level name; unknown names fall back to INFO
        development: console output when True, JSON when False. Defaults to
            DEBUG or ENV=development.
    """
    if development is None:
        from .config import get_settings

        development = get_settings().debug or os.getenv("ENV", "development") == "development"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _tag_service,
            *_renderers(development),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware:
    """
    Logs request_started / request_complete around each HTTP request.

    Must run inside RequestIDMiddleware, which binds the request ID these
    events are tagged with.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method, path = scope.get("method", ""), scope.get("path", "")
        self.logger.info("request_started", method=method, path=path)

        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self.logger.log(
                _level_for(status_code),
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_seconds=round(time.perf_counter() - started, 3),
            )


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "RequestLoggingMiddleware",
]
