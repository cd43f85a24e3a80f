"""
OTP Entry
=========
Code buffer, resend timer and the value objects of the entry flow.

``OTPEntryFlow`` and ``CountdownTicker`` live in ``entry.flow`` and
``entry.ticker`` and are re-exported from the top-level package.
"""

from .models import (
    EntryState,
    CooldownState,
    VerificationResult,
    ErrorPresentation,
    VerificationAttempt,
    ErrorNotice,
    FlowSnapshot,
)
from .buffer import CODE_LENGTH, CodeBuffer, extract_digits
from .timer import DEFAULT_COOLDOWN_SECONDS, ResendTimer

__all__ = [
    # Models
    "EntryState",
    "CooldownState",
    "VerificationResult",
    "ErrorPresentation",
    "VerificationAttempt",
    "ErrorNotice",
    "FlowSnapshot",
    # Buffer
    "CODE_LENGTH",
    "CodeBuffer",
    "extract_digits",
    # Timer
    "DEFAULT_COOLDOWN_SECONDS",
    "ResendTimer",
]
