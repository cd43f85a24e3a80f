from typing import Optional, Any


class BackendError(Exception):
    """Base exception for all Farmer Assist backend errors."""
    def __init__(self, message: str, endpoint: str = "unknown", status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code
        self.details = details
        super().__init__(f"[{endpoint}] {message} (Status: {status_code})")


class BackendUnavailableError(BackendError):
    """Raised when the backend is unreachable or returns 5xx."""
    pass


class BackendTimeoutError(BackendUnavailableError):
    """Raised specifically on timeouts."""
    pass


class BackendRejectedError(BackendError):
    """Raised when the backend refuses the request (4xx)."""
    pass
