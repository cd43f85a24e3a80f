"""
OTP Flow Exceptions
===================
Error taxonomy for the OTP entry flow.

None of these are fatal to the flow. ``submit()`` returns them attached to a
``VerificationAttempt`` rather than raising; hosts that prefer exceptions can
call ``attempt.raise_for_result()``.
"""

from typing import Optional


INCOMPLETE_CODE_MESSAGE = "Please enter all 6 digits"
MISMATCH_MESSAGE = "The OTP you entered is incorrect. Please try again."
UNAVAILABLE_MESSAGE = "We couldn't verify the code right now. Please try again."


class OTPFlowError(Exception):
    """Base exception for recoverable OTP flow errors."""

    code = "OTP_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class IncompleteCodeError(OTPFlowError):
    """Submit attempted with fewer than 6 digits filled."""

    code = "INCOMPLETE_CODE"

    def __init__(self, filled: int, message: str = INCOMPLETE_CODE_MESSAGE):
        self.filled = filled
        super().__init__(message)


class MismatchError(OTPFlowError):
    """The verifier reported that the code does not match."""

    code = "OTP_MISMATCH"

    def __init__(self, message: str = MISMATCH_MESSAGE):
        super().__init__(message)


class ResendTooSoonError(OTPFlowError):
    """Resend requested while the cooldown is still running."""

    code = "RESEND_TOO_SOON"

    def __init__(self, seconds_remaining: int):
        self.seconds_remaining = seconds_remaining
        super().__init__(f"Resend available in {seconds_remaining}s")


class VerifierUnavailableError(OTPFlowError):
    """The verifier could not produce an answer (transport failure, timeout)."""

    code = "VERIFIER_UNAVAILABLE"

    def __init__(self, message: str = UNAVAILABLE_MESSAGE, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class InvalidPhoneError(OTPFlowError):
    """Phone number rejected before an OTP is requested."""

    code = "INVALID_PHONE"

    def __init__(self, message: str = "Please enter a valid 10-digit phone number"):
        super().__init__(message)
