import asyncio

import pytest

from farmassist_otp.verifiers import VerifyResponse


class SpyVerifier:
    """Verifier that compares against a fixed code and records every call."""

    def __init__(self, expected: str = "000000"):
        self.expected = expected
        self.calls = []

    async def verify(self, code: str) -> VerifyResponse:
        self.calls.append(code)
        return VerifyResponse(matched=code == self.expected)


class GatedVerifier:
    """Verifier that blocks until the test releases it."""

    def __init__(self, matched: bool = True):
        self.matched = matched
        self.gate = asyncio.Event()
        self.calls = 0

    async def verify(self, code: str) -> VerifyResponse:
        self.calls += 1
        await self.gate.wait()
        return VerifyResponse(matched=self.matched)


class Recorder:
    """Collects flow callback payloads."""

    def __init__(self):
        self.focus = []
        self.errors = []
        self.completions = []

    def callbacks(self):
        return {
            "on_focus": self.focus.append,
            "on_error": self.errors.append,
            "on_complete": self.completions.append,
        }


@pytest.fixture
def spy_verifier():
    return SpyVerifier()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_flow(spy_verifier, recorder):
    """Build a flow with no success delay, wired to the recorder."""
    from farmassist_otp import OTPEntryFlow, OTPFlowConfig

    def _make(verifier=None, **config_kwargs):
        config_kwargs.setdefault("success_delay_ms", 0)
        return OTPEntryFlow(
            verifier or spy_verifier,
            config=OTPFlowConfig(**config_kwargs),
            **recorder.callbacks(),
        )

    return _make
