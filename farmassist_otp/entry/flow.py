"""
OTP Entry Flow
==============
State machine behind the "Enter Verification Code" screen.

The host screen forwards keystrokes, pastes and button presses; the flow owns
the code buffer, derived focus, resend cooldown and verification, and talks
back through three callbacks:

    on_focus(index)         focus the given slot
    on_error(ErrorNotice)   show an error (and shake the inputs if asked)
    on_complete(attempt)    verification succeeded, leave the screen
"""

import asyncio
import uuid
from typing import Callable, Optional, Tuple

import structlog

from ..config import OTPFlowConfig
from ..dispatch import NullResendDispatcher, ResendDispatcher
from ..exceptions import (
    IncompleteCodeError,
    MismatchError,
    OTPFlowError,
    ResendTooSoonError,
    VerifierUnavailableError,
)
from ..http import BackendError
from ..phone import format_display_phone
from ..verifiers import CodeVerifier, FixedCodeVerifier
from .buffer import CodeBuffer
from .models import (
    CooldownState,
    EntryState,
    ErrorNotice,
    ErrorPresentation,
    FlowSnapshot,
    VerificationAttempt,
    VerificationResult,
)
from .timer import ResendTimer

logger = structlog.get_logger(__name__)

MODAL_ERROR_TITLE = "Wrong OTP"

FocusCallback = Callable[[int], None]
ErrorCallback = Callable[[ErrorNotice], None]
CompleteCallback = Callable[[VerificationAttempt], None]


class OTPEntryFlow:
    """
    Six-slot OTP entry with resend cooldown and single-flight verification.

    Example:
        flow = OTPEntryFlow(
            FixedCodeVerifier("000000"),
            on_complete=lambda attempt: router.replace("/(tabs)"),
        )
        flow.input_digit(0, "000000")
        attempt = await flow.submit()
    """

    def __init__(
        self,
        verifier: Optional[CodeVerifier] = None,
        dispatcher: Optional[ResendDispatcher] = None,
        config: Optional[OTPFlowConfig] = None,
        phone_number: Optional[str] = None,
        country_code: Optional[str] = None,
        on_focus: Optional[FocusCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ):
        self.config = config or OTPFlowConfig()

        if verifier is None:
            if self.config.expected_code is None:
                raise ValueError("A verifier is required when no expected_code is configured")
            verifier = FixedCodeVerifier(self.config.expected_code)

        self.verifier = verifier
        self.dispatcher = dispatcher or NullResendDispatcher()
        self.phone_number = phone_number
        self.country_code = country_code
        self.on_focus = on_focus
        self.on_error = on_error
        self.on_complete = on_complete

        self.id = str(uuid.uuid4())
        self._buffer = CodeBuffer(self.config.code_length)
        self._timer = ResendTimer(self.config.resend_cooldown_seconds)
        self._focus = 0
        self._state = EntryState.ENTERING
        self._notice: Optional[ErrorNotice] = None
        self._submitting = False
        self._closed = False
        self._log = logger.bind(flow_id=self.id)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def slots(self) -> Tuple[str, ...]:
        return self._buffer.slots

    @property
    def code(self) -> str:
        return self._buffer.code

    @property
    def focus_index(self) -> int:
        return self._focus

    @property
    def state(self) -> EntryState:
        return self._state

    @property
    def notice(self) -> Optional[ErrorNotice]:
        return self._notice

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def seconds_remaining(self) -> int:
        return self._timer.seconds_remaining

    @property
    def can_resend(self) -> bool:
        return self._timer.can_resend

    @property
    def cooldown_state(self) -> CooldownState:
        return self._timer.state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def display_phone(self) -> str:
        return format_display_phone(self.phone_number, self.country_code)

    def is_complete(self) -> bool:
        return self._buffer.is_complete()

    def resend_prompt(self) -> str:
        if self._timer.can_resend:
            return "Didn't receive the code?"
        return f"Resend code in {self._timer.seconds_remaining}s"

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(
            slots=self._buffer.slots,
            focus_index=self._focus,
            state=self._state,
            seconds_remaining=self._timer.seconds_remaining,
            can_resend=self._timer.can_resend,
            is_submitting=self._submitting,
            notice=self._notice,
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _accepts_input(self) -> bool:
        return not (self._closed or self._submitting or self._state is EntryState.SUCCEEDED)

    def _move_focus(self, index: int) -> None:
        self._focus = index
        if self.on_focus:
            self.on_focus(index)

    def _refresh_state(self) -> None:
        self._state = EntryState.READY if self._buffer.is_complete() else EntryState.ENTERING

    def input_digit(self, slot_index: int, raw_text: Optional[str]) -> Tuple[Tuple[str, ...], int]:
        """
        Handle text typed or pasted into a slot.

        Returns:
            Tuple of (slots, focus_index)
        """
        if not self._accepts_input():
            return self._buffer.slots, self._focus

        before = self._buffer.slots
        focus = self._buffer.input(slot_index, raw_text, focus=self._focus)
        if self._buffer.slots != before or focus != self._focus:
            self._move_focus(focus)
        self._refresh_state()
        return self._buffer.slots, self._focus

    def backspace(self, slot_index: int) -> Tuple[Tuple[str, ...], int]:
        """Handle a backspace key press on a slot."""
        if not self._accepts_input():
            return self._buffer.slots, self._focus

        self._move_focus(self._buffer.backspace(slot_index))
        self._refresh_state()
        return self._buffer.slots, self._focus

    def dismiss_error(self) -> None:
        self._notice = None

    def _reset_entry(self) -> None:
        self._buffer.clear()
        self._state = EntryState.ENTERING
        self._move_focus(0)

    def _emit_error(self, error: OTPFlowError, shake: bool = False) -> None:
        presentation = self.config.error_presentation
        self._notice = ErrorNotice(
            message=error.message,
            code=error.code,
            presentation=presentation,
            shake=shake,
            title=MODAL_ERROR_TITLE if presentation is ErrorPresentation.MODAL else None,
        )
        if self.on_error:
            self.on_error(self._notice)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    async def submit(self) -> Optional[VerificationAttempt]:
        """
        Verify the entered code.

        Returns None when the call is ignored: a submission is already in
        flight, the flow has succeeded, or it was closed.
        """
        if self._closed or self._state is EntryState.SUCCEEDED:
            return None
        if self._submitting:
            self._log.debug("otp_submit_ignored", reason="in_flight")
            return None

        attempt = VerificationAttempt(submitted_code=self._buffer.code)

        if not self._buffer.is_complete():
            attempt.result = VerificationResult.FAILURE
            attempt.error = IncompleteCodeError(self._buffer.filled_count)
            self._log.info("otp_submit_rejected", filled=self._buffer.filled_count)
            self._emit_error(attempt.error)
            return attempt

        self._submitting = True
        self._state = EntryState.VERIFYING
        self._notice = None
        try:
            matched = await self._verify(attempt.submitted_code)
        except VerifierUnavailableError as e:
            attempt.result = VerificationResult.FAILURE
            attempt.error = e
            self._submitting = False
            if self._closed:
                return attempt
            self._log.warning("otp_verifier_unavailable", error=str(e.cause or e))
            self._refresh_state()
            self._emit_error(e)
            return attempt
        except BaseException:
            # Verifier bug or cancellation: unlock input and propagate
            self._submitting = False
            self._refresh_state()
            raise

        if not matched:
            attempt.result = VerificationResult.FAILURE
            attempt.error = MismatchError()
            self._submitting = False
            if self._closed:
                return attempt
            self._log.info("otp_verification_failed")
            self._reset_entry()
            self._emit_error(attempt.error, shake=True)
            return attempt

        if self.config.success_delay_ms:
            try:
                await asyncio.sleep(self.config.success_delay_ms / 1000)
            except BaseException:
                self._submitting = False
                self._refresh_state()
                raise

        attempt.result = VerificationResult.SUCCESS
        self._submitting = False
        if self._closed:
            return attempt
        self._state = EntryState.SUCCEEDED
        self._log.info("otp_verified")
        if self.on_complete:
            self.on_complete(attempt)
        return attempt

    async def _verify(self, code: str) -> bool:
        try:
            response = await self.verifier.verify(code)
        except BackendError as e:
            raise VerifierUnavailableError(cause=e) from e
        return bool(response.matched)

    # ------------------------------------------------------------------
    # Resend cooldown
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """
        Advance the resend countdown by one second.

        Returns:
            True if this tick made resend available
        """
        if self._closed:
            return False
        return self._timer.tick()

    async def resend(self) -> bool:
        """
        Request a new code if the cooldown has elapsed.

        Returns:
            True if a new code was requested, False if ignored
        """
        if self._closed or not self._timer.can_resend:
            self._log.debug("otp_resend_ignored", seconds_remaining=self._timer.seconds_remaining)
            return False

        self._timer.restart()
        self._notice = None
        self._reset_entry()
        self._log.info("otp_resend_requested")
        await self.dispatcher.request_new_code()
        return True

    async def require_resend(self) -> None:
        """Like ``resend()`` but raises ``ResendTooSoonError`` during cooldown."""
        if not self._closed and not self._timer.can_resend:
            raise ResendTooSoonError(self._timer.seconds_remaining)
        await self.resend()

    def close(self) -> None:
        """
        Tear the flow down.

        An in-flight verification still runs to completion, but its result
        no longer changes the flow or fires callbacks.
        """
        if not self._closed:
            self._closed = True
            self._log.debug("otp_flow_closed", state=self._state.value)
