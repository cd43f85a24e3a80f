"""
Farmer Assist OTP Logging

Structured logging setup for hosts of the OTP flow.
"""

from .structured import (
    setup_logging,
    get_logger,
    log_event,
    log_error,
    JSONFormatter,
    service_name_var,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "log_error",
    "JSONFormatter",
    "service_name_var",
]
