"""
Logging setup: structlog on top of the standard library handlers.

Text output uses structlog's console renderer; ``LOG_FORMAT=json`` switches
both structlog and plain ``logging`` records to JSON lines.
"""

import logging
import logging.config
import time

import structlog

from app.core.config import settings

PROBE_PATHS = ("/health", "/ready", "/live")


def configure_logging() -> None:
    """Configure application logging based on settings."""
    json_output = settings.LOG_FORMAT == "json"

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_output
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_output:
        formatter = {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }
    else:
        formatter = {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}

    def quiet(level: str = "WARNING", **extra) -> dict:
        return {"level": level, "handlers": ["default"], "propagate": False, **extra}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"probe_filter": {"()": ProbeRequestFilter}},
            "formatters": {"default": formatter},
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": quiet(settings.LOG_LEVEL),
                "uvicorn.error": quiet("INFO"),
                "uvicorn.access": quiet("INFO", filters=["probe_filter"]),
                # The driver is chatty at DEBUG (heartbeats, topology events)
                "pymongo": quiet(),
                "httpx": quiet(),
                "asyncio": quiet("DEBUG" if settings.DEBUG else "WARNING"),
            },
        }
    )


class ProbeRequestFilter(logging.Filter):
    """Drop uvicorn access records for health probe requests."""

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn formats the request line as "GET /health HTTP/1.1"
        message = record.getMessage()
        return not any(f" {path} " in message for path in PROBE_PATHS)


class RequestLoggingMiddleware:
    """ASGI middleware logging each non-probe request with status and timing."""

    def __init__(self, app):
        self.app = app
        self.logger = structlog.get_logger("request")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope["path"] in PROBE_PATHS:
            await self.app(scope, receive, send)
            return

        method, path = scope["method"], scope["path"]
        self.logger.info(
            "Request started",
            method=method,
            path=path,
            query_string=scope.get("query_string", b"").decode(),
        )
        start = time.perf_counter()
        status_code = None

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            elif message["type"] == "http.response.body" and not message.get(
                "more_body", False
            ):
                self.logger.info(
                    "Request completed",
                    method=method,
                    path=path,
                    status_code=status_code,
                    duration=round(time.perf_counter() - start, 4),
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)


def setup_request_logging(app):
    """Add request logging middleware in debug mode."""
    if settings.DEBUG:
        app.add_middleware(RequestLoggingMiddleware)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def get_api_logger() -> structlog.BoundLogger:
    return get_logger("api")


def get_db_logger() -> structlog.BoundLogger:
    return get_logger("database")


def get_service_logger(service_name: str) -> structlog.BoundLogger:
    return get_logger(f"service.{service_name}")
