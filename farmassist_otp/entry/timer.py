"""
Resend Timer
============
Countdown gating how often a new code can be requested.

The timer never reads a clock. Whoever owns it calls ``tick()`` once per
second (see ``CountdownTicker``), so tests can drive it directly.
"""

import structlog

from .models import CooldownState

logger = structlog.get_logger(__name__)

DEFAULT_COOLDOWN_SECONDS = 60


class ResendTimer:
    """Resend cooldown counter."""

    def __init__(self, cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS):
        if cooldown_seconds < 0:
            raise ValueError("Cooldown must be non-negative")
        self.cooldown_seconds = cooldown_seconds
        self.seconds_remaining = cooldown_seconds
        self.can_resend = cooldown_seconds == 0

    @property
    def state(self) -> CooldownState:
        return CooldownState.ELAPSED if self.can_resend else CooldownState.ACTIVE

    def tick(self) -> bool:
        """
        Advance the countdown by one second.

        Returns:
            True if this tick ended the cooldown
        """
        if self.can_resend:
            return False

        self.seconds_remaining = max(self.seconds_remaining - 1, 0)
        if self.seconds_remaining == 0:
            self.can_resend = True
            logger.debug("resend_cooldown_elapsed")
            return True
        return False

    def restart(self) -> None:
        self.seconds_remaining = self.cooldown_seconds
        self.can_resend = self.cooldown_seconds == 0
