"""
Resend Dispatchers
==================
Collaborators asked to issue a fresh code when the user taps "Resend OTP".
"""

from typing import Optional, Protocol

import structlog

from .config import BackendConfig
from .http import BackendClient

logger = structlog.get_logger(__name__)


class ResendDispatcher(Protocol):
    async def request_new_code(self) -> None:
        ...


class NullResendDispatcher:
    """Records resend requests without sending anything."""

    def __init__(self):
        self.requests = 0

    async def request_new_code(self) -> None:
        self.requests += 1


class BackendResendDispatcher:
    """Asks the Farmer Assist backend to send a new code by SMS."""

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

    async def request_new_code(self) -> None:
        await self.client.post(
            self.config.send_path,
            json={"phoneNumber": self.phone, "countryCode": self.country_code},
        )
        logger.info("otp_resend_dispatched", country_code=self.country_code)
