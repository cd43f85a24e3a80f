from .client import BackendClient
from .exceptions import (
    BackendError,
    BackendUnavailableError,
    BackendTimeoutError,
    BackendRejectedError,
)

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendUnavailableError",
    "BackendTimeoutError",
    "BackendRejectedError",
]
