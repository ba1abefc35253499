"""
Structured logging for the memoreel backend.

One JSON object per line in production; the console renderer is used when
json_logs is off. Fields bound with structlog.contextvars (the request id
from RequestContextMiddleware) are merged into every event.
"""

import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory

# Third-party loggers that are too chatty below WARNING
QUIET_LOGGERS = ("psycopg.pool", "httpx", "uvicorn.access")


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: JSON lines when true, human-readable console output otherwise
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_health_check(service: str, healthy: bool, latency_ms: float, error: str = None):
    """Log a readiness probe result for one dependency."""
    logger = get_logger("health")

    fields = {"service": service, "healthy": healthy, "latency_ms": latency_ms}
    if error:
        fields["error"] = error

    if healthy:
        logger.debug("Readiness check passed", **fields)
    else:
        logger.error("Readiness check failed", **fields)


def log_request(method: str, path: str, status_code: int, duration_ms: float, user_id: str = None):
    """Log one HTTP request; 4xx at warning, 5xx at error."""
    logger = get_logger("http")

    fields = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    if user_id:
        fields["user_id"] = user_id

    if status_code >= 500:
        logger.error("HTTP request failed", **fields)
    elif status_code >= 400:
        logger.warning("HTTP request rejected", **fields)
    else:
        logger.info("HTTP request completed", **fields)
