"""
Structured Logging
==================
JSON logging for hosts embedding the OTP flow.

Library modules log with ``structlog.get_logger(__name__)``; calling
``setup_logging`` once at startup routes those events through the standard
library root logger and renders every record as one JSON line.

Usage:
    from farmassist_otp.logging import setup_logging, log_event

    setup_logging(service_name="farmer-assist-app")
    log_event("otp.screen_opened", country_code="+91")
"""

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

service_name_var: ContextVar[str] = ContextVar("service_name", default="unknown")

# Attributes every LogRecord has; anything else arrived through ``extra``
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": service_name_var.get(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key != "extra_data":
                log_data[key] = value

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, default=str)


# =============================================================================
# Setup
# =============================================================================

def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
    stream=None,
) -> logging.Logger:
    """
    Configure stdlib and structlog logging.

    Args:
        service_name: Name reported in every record
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, plain text otherwise
        stream: Output stream (default stdout)

    Returns:
        Configured root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        ))
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger.info(f"Logging configured for {service_name}", extra={
        "extra_data": {"event": "logging.configured", "service": service_name}
    })
    return root_logger


# =============================================================================
# Logging Functions
# =============================================================================

def get_logger(name: str):
    """Get a structlog logger with the given name."""
    return structlog.get_logger(name)


def log_event(event_type: str, level: str = "INFO", **kwargs) -> None:
    """
    Log a structured event.

    Args:
        event_type: Type of event (e.g., "otp.verified", "otp.resent")
        level: Log level
        **kwargs: Additional event data
    """
    logger = logging.getLogger("farmassist_otp.events")
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(log_level, f"Event: {event_type}", extra={
        "extra_data": {"event": event_type, "event_data": kwargs}
    })


def log_error(error: Exception, context: Optional[str] = None, **kwargs: Any) -> None:
    """Log an error with its traceback and context."""
    logger = logging.getLogger("farmassist_otp.errors")
    extra_data: Dict[str, Any] = {
        "error": True,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context,
        "error_data": kwargs,
    }
    logger.error(
        f"Error: {context or type(error).__name__}",
        exc_info=error,
        extra={"extra_data": extra_data},
    )
