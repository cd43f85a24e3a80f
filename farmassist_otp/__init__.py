"""
Farmer Assist OTP
=================
Phone-number OTP entry and verification flow for the Farmer Assist app.
"""

__version__ = "1.0.0"

# Errors
from farmassist_otp.exceptions import (
    OTPFlowError,
    IncompleteCodeError,
    MismatchError,
    ResendTooSoonError,
    VerifierUnavailableError,
    InvalidPhoneError,
)

# Config
from farmassist_otp.config import OTPFlowConfig, BackendConfig

# Entry
from farmassist_otp.entry import (
    EntryState,
    CooldownState,
    VerificationResult,
    ErrorPresentation,
    VerificationAttempt,
    ErrorNotice,
    FlowSnapshot,
    CODE_LENGTH,
    CodeBuffer,
    extract_digits,
    ResendTimer,
)
from farmassist_otp.entry.flow import OTPEntryFlow
from farmassist_otp.entry.ticker import CountdownTicker

# Collaborators
from farmassist_otp.verifiers import (
    CodeVerifier,
    VerifyResponse,
    FixedCodeVerifier,
    AcceptAnyVerifier,
    BackendCodeVerifier,
)
from farmassist_otp.dispatch import (
    ResendDispatcher,
    NullResendDispatcher,
    BackendResendDispatcher,
)
from farmassist_otp.http import BackendClient

# Phone
from farmassist_otp.phone import (
    COUNTRY_CODES,
    clean_phone,
    validate_phone,
    format_display_phone,
)

__all__ = [
    # Errors
    "OTPFlowError",
    "IncompleteCodeError",
    "MismatchError",
    "ResendTooSoonError",
    "VerifierUnavailableError",
    "InvalidPhoneError",
    # Config
    "OTPFlowConfig",
    "BackendConfig",
    # Entry
    "EntryState",
    "CooldownState",
    "VerificationResult",
    "ErrorPresentation",
    "VerificationAttempt",
    "ErrorNotice",
    "FlowSnapshot",
    "CODE_LENGTH",
    "CodeBuffer",
    "extract_digits",
    "ResendTimer",
    "OTPEntryFlow",
    "CountdownTicker",
    # Collaborators
    "CodeVerifier",
    "VerifyResponse",
    "FixedCodeVerifier",
    "AcceptAnyVerifier",
    "BackendCodeVerifier",
    "ResendDispatcher",
    "NullResendDispatcher",
    "BackendResendDispatcher",
    "BackendClient",
    # Phone
    "COUNTRY_CODES",
    "clean_phone",
    "validate_phone",
    "format_display_phone",
]
