import logging
import httpx
from typing import Optional, Type, TypeVar, Any, Dict, Union
from pydantic import BaseModel, ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log

from ..config import BackendConfig
from .exceptions import (
    BackendError,
    BackendUnavailableError,
    BackendTimeoutError,
    BackendRejectedError,
)

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Async HTTP client for the Farmer Assist API.

    Features:
    - Retries on network errors, timeouts and 5xx responses.
    - Unwraps the ``{"success": ..., "data": ...}`` response envelope.
    - Pydantic model validation of response payloads.
    """

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_attempts: int = 3,
        backoff_min: float = 1.0,
        backoff_max: float = 10.0,
    ):
        self.config = config or BackendConfig()
        self.max_attempts = max_attempts
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max

        headers = {
            "User-Agent": "FarmerAssist-OTP-Client",
            "Accept": "application/json",
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        self.client = httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            timeout=self.config.timeout,
            headers=headers,
            transport=transport,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    def _map_exception(self, exc: Exception, path: str) -> Exception:
        """Map httpx exceptions to backend exceptions."""
        if isinstance(exc, httpx.TimeoutException):
            return BackendTimeoutError("Request timed out", endpoint=path)
        if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
            return BackendUnavailableError(f"Failed to connect: {exc}", endpoint=path)
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            text = exc.response.text
            if status >= 500:
                return BackendUnavailableError("Server error", endpoint=path, status_code=status, details=text)
            if status >= 400:
                return BackendRejectedError(f"HTTP {status} Error", endpoint=path, status_code=status, details=text)
            return BackendError(f"HTTP {status} Error", endpoint=path, status_code=status, details=text)

        return BackendError(f"Unexpected error: {exc}", endpoint=path)

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._map_exception(e, path) from e

        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise BackendError(
                "Invalid JSON response",
                endpoint=path,
                status_code=response.status_code,
                details=response.text[:200],
            ) from e

        if isinstance(body, dict) and "data" in body:
            if body.get("success") is False:
                raise BackendRejectedError(
                    body.get("message", "Request failed"),
                    endpoint=path,
                    status_code=response.status_code,
                    details=body,
                )
            return body["data"]
        return body

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[T]] = None,
        **kwargs
    ) -> Union[T, Dict[str, Any], None]:
        """Execute request with retries and error handling."""
        retrying = retry(
            retry=retry_if_exception_type((BackendUnavailableError, BackendTimeoutError)),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=self.backoff_min, max=self.backoff_max),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        data = await retrying(self._send)(method, path, **kwargs)

        if response_model is not None and data is not None:
            try:
                return response_model.model_validate(data)
            except ValidationError as e:
                raise BackendError(
                    f"Unexpected response shape: {e.error_count()} errors",
                    endpoint=path,
                    details=data,
                ) from e
        return data

    async def post(self, path: str, json: Any = None, response_model: Optional[Type[T]] = None) -> Union[T, Dict, None]:
        return await self._request("POST", path, json=json, response_model=response_model)
