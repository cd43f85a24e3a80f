"""
OTP Entry Models
================
Enums and value objects shared by the entry state machine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..exceptions import OTPFlowError


class EntryState(str, Enum):
    """Code-entry states."""
    ENTERING = "entering"    # Buffer incomplete
    READY = "ready"          # Buffer complete, awaiting submit
    VERIFYING = "verifying"  # Submission in flight
    SUCCEEDED = "succeeded"  # Terminal


class CooldownState(str, Enum):
    """Resend cooldown states."""
    ACTIVE = "cooldown_active"
    ELAPSED = "cooldown_elapsed"


class VerificationResult(str, Enum):
    """Outcome of a verification attempt."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorPresentation(str, Enum):
    """How the host should display verification errors."""
    INLINE = "inline"
    MODAL = "modal"


@dataclass
class VerificationAttempt:
    """A single submit() call and its outcome."""
    submitted_code: str
    result: VerificationResult = VerificationResult.PENDING
    error: Optional[OTPFlowError] = None

    @property
    def failure_message(self) -> Optional[str]:
        if self.result is VerificationResult.FAILURE and self.error is not None:
            return self.error.message
        return None

    @property
    def succeeded(self) -> bool:
        return self.result is VerificationResult.SUCCESS

    def raise_for_result(self) -> None:
        """Raise the attached error if the attempt failed."""
        if self.result is VerificationResult.FAILURE and self.error is not None:
            raise self.error


@dataclass(frozen=True)
class ErrorNotice:
    """Payload of the error display signal."""
    message: str
    code: str
    presentation: ErrorPresentation
    shake: bool = False
    title: Optional[str] = None


@dataclass(frozen=True)
class FlowSnapshot:
    """Read-only view of the flow for rendering."""
    slots: Tuple[str, ...]
    focus_index: int
    state: EntryState
    seconds_remaining: int
    can_resend: bool
    is_submitting: bool
    notice: Optional[ErrorNotice] = None

    @property
    def code(self) -> str:
        return "".join(self.slots)
