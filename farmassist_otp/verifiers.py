"""
Code Verifiers
==============
Pluggable collaborators that decide whether a submitted code matches.

A verifier is any object with ``async verify(code) -> VerifyResponse``.
Transport failures should surface as ``VerifierUnavailableError`` (or a
``BackendError``), never as a mismatch.
"""

import asyncio
import hmac
from typing import Optional, Protocol

import structlog
from pydantic import BaseModel

from .config import BackendConfig
from .exceptions import VerifierUnavailableError
from .http import BackendClient, BackendError, BackendRejectedError

logger = structlog.get_logger(__name__)


class VerifyResponse(BaseModel):
    """Verifier answer."""
    matched: bool


class CodeVerifier(Protocol):
    async def verify(self, code: str) -> VerifyResponse:
        ...


class FixedCodeVerifier:
    """Accepts exactly one well-known code (test builds)."""

    def __init__(self, expected_code: str):
        self.expected_code = expected_code

    async def verify(self, code: str) -> VerifyResponse:
        return VerifyResponse(matched=hmac.compare_digest(code, self.expected_code))


class AcceptAnyVerifier:
    """Accepts every complete code after an optional delay (demo builds)."""

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = delay_seconds

    async def verify(self, code: str) -> VerifyResponse:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return VerifyResponse(matched=True)


class BackendCodeVerifier:
    """
    Verifies codes against the Farmer Assist auth backend.

    Example:
        async with BackendClient(BackendConfig.from_env()) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            flow = OTPEntryFlow(verifier)
    """

    def __init__(
        self,
        client: BackendClient,
        phone: str,
        country_code: str,
        config: Optional[BackendConfig] = None,
    ):
        self.client = client
        self.phone = phone
        self.country_code = country_code
        self.config = config or client.config

    async def verify(self, code: str) -> VerifyResponse:
        payload = {
            "phoneNumber": self.phone,
            "countryCode": self.country_code,
            "otp": code,
        }
        try:
            response = await self.client.post(
                self.config.verify_path, json=payload, response_model=VerifyResponse
            )
        except BackendRejectedError as e:
            # 4xx: the backend looked at the code and said no
            logger.info("otp_verify_rejected", status_code=e.status_code)
            return VerifyResponse(matched=False)
        except BackendError as e:
            logger.warning("otp_verify_unavailable", error=str(e))
            raise VerifierUnavailableError(cause=e) from e

        if response is None:
            raise VerifierUnavailableError()
        return response
