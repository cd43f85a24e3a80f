"""
OTP Flow Configuration
======================
Settings for the entry flow and the backend it talks to.

The OTP screens of the app differed only in these knobs (fixed test code,
success delay, how errors are shown), so they are configuration rather than
separate flows.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .entry.buffer import CODE_LENGTH
from .entry.models import ErrorPresentation
from .entry.timer import DEFAULT_COOLDOWN_SECONDS

DEFAULT_API_URL = "http://localhost:3000/api/v1"


@dataclass
class OTPFlowConfig:
    """Configuration for a single OTP entry flow."""
    code_length: int = CODE_LENGTH
    resend_cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS
    expected_code: Optional[str] = None  # None = delegate to the verifier
    success_delay_ms: int = 800
    error_presentation: ErrorPresentation = ErrorPresentation.MODAL

    def __post_init__(self):
        if self.code_length != CODE_LENGTH:
            raise ValueError(f"OTP codes are always {CODE_LENGTH} digits")
        if self.resend_cooldown_seconds < 0:
            raise ValueError("resend_cooldown_seconds must be >= 0")
        if self.success_delay_ms < 0:
            raise ValueError("success_delay_ms must be >= 0")
        if self.expected_code is not None and (
            len(self.expected_code) != self.code_length or not self.expected_code.isdigit()
        ):
            raise ValueError(f"expected_code must be {self.code_length} digits")
        self.error_presentation = ErrorPresentation(self.error_presentation)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OTPFlowConfig":
        """
        Build a config from environment variables.

        Variables:
            OTP_RESEND_COOLDOWN_SECONDS: Cooldown before resend (default 60)
            OTP_TEST_CODE: Fixed code accepted by the built-in verifier
            OTP_SUCCESS_DELAY_MS: Pause before completion (default 800)
            OTP_ERROR_PRESENTATION: "inline" or "modal" (default "modal")
        """
        env = os.environ if environ is None else environ
        return cls(
            resend_cooldown_seconds=int(
                env.get("OTP_RESEND_COOLDOWN_SECONDS", DEFAULT_COOLDOWN_SECONDS)
            ),
            expected_code=env.get("OTP_TEST_CODE") or None,
            success_delay_ms=int(env.get("OTP_SUCCESS_DELAY_MS", 800)),
            error_presentation=ErrorPresentation(
                env.get("OTP_ERROR_PRESENTATION", ErrorPresentation.MODAL.value).lower()
            ),
        )


@dataclass
class BackendConfig:
    """Configuration for the Farmer Assist auth backend."""
    base_url: str = DEFAULT_API_URL
    verify_path: str = "/auth/otp/verify"
    send_path: str = "/auth/otp/send"
    api_key: Optional[str] = None
    timeout: float = 10.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BackendConfig":
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get("FARMASSIST_API_URL", DEFAULT_API_URL),
            api_key=env.get("FARMASSIST_API_KEY") or None,
            timeout=float(env.get("FARMASSIST_API_TIMEOUT", 10.0)),
        )
