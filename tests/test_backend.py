"""
Unit Tests for Backend Collaborators
====================================
HTTP verifier and resend dispatcher against a mocked transport.
"""

import json

import httpx
import pytest


def make_client(handler, **kwargs):
    from farmassist_otp import BackendClient, BackendConfig

    kwargs.setdefault("backoff_min", 0)
    kwargs.setdefault("backoff_max", 0)
    return BackendClient(
        BackendConfig(base_url="http://api.test/api/v1"),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestBackendCodeVerifier:
    """Tests for verification against the backend."""

    @pytest.mark.asyncio
    async def test_matched_code(self):
        """Should unwrap the envelope and report a match."""
        from farmassist_otp import BackendCodeVerifier

        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": {"matched": True}})

        async with make_client(handler) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            response = await verifier.verify("123456")

        assert response.matched is True
        assert seen[0].url.path == "/api/v1/auth/otp/verify"
        assert json.loads(seen[0].content) == {
            "phoneNumber": "9876543210",
            "countryCode": "+91",
            "otp": "123456",
        }

    @pytest.mark.asyncio
    async def test_rejected_code(self):
        """Should treat a 4xx answer as a mismatch."""
        from farmassist_otp import BackendCodeVerifier

        def handler(request):
            return httpx.Response(400, json={"success": False, "message": "Invalid OTP"})

        async with make_client(handler) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            response = await verifier.verify("111111")

        assert response.matched is False

    @pytest.mark.asyncio
    async def test_server_error_is_unavailable(self):
        """Should retry 5xx and then raise VerifierUnavailableError."""
        from farmassist_otp import BackendCodeVerifier, VerifierUnavailableError

        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="down")

        async with make_client(handler, max_attempts=2) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            with pytest.raises(VerifierUnavailableError):
                await verifier.verify("123456")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_connect_error_is_unavailable(self):
        """Should map transport failures to VerifierUnavailableError."""
        from farmassist_otp import BackendCodeVerifier, VerifierUnavailableError
        from farmassist_otp.http import BackendUnavailableError

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with make_client(handler, max_attempts=1) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            with pytest.raises(VerifierUnavailableError) as exc_info:
                await verifier.verify("123456")

        assert isinstance(exc_info.value.cause, BackendUnavailableError)

    @pytest.mark.asyncio
    async def test_non_json_body_is_unavailable(self, recorder):
        """Should report an HTML gateway page as VERIFIER_UNAVAILABLE."""
        from farmassist_otp import BackendCodeVerifier, OTPEntryFlow, OTPFlowConfig, EntryState

        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        async with make_client(handler) as client:
            flow = OTPEntryFlow(
                BackendCodeVerifier(client, phone="9876543210", country_code="+91"),
                config=OTPFlowConfig(success_delay_ms=0),
                **recorder.callbacks(),
            )
            flow.input_digit(0, "123456")
            attempt = await flow.submit()

        assert attempt.error.code == "VERIFIER_UNAVAILABLE"
        assert flow.code == "123456"
        assert flow.state == EntryState.READY
        assert recorder.completions == []

    @pytest.mark.asyncio
    async def test_malformed_payload_is_unavailable(self):
        """Should map a payload without 'matched' to VerifierUnavailableError."""
        from farmassist_otp import BackendCodeVerifier, VerifierUnavailableError
        from farmassist_otp.http import BackendError

        def handler(request):
            return httpx.Response(200, json={"success": True, "data": {"status": "ok"}})

        async with make_client(handler) as client:
            verifier = BackendCodeVerifier(client, phone="9876543210", country_code="+91")
            with pytest.raises(VerifierUnavailableError) as exc_info:
                await verifier.verify("123456")

        assert isinstance(exc_info.value.cause, BackendError)

    @pytest.mark.asyncio
    async def test_flow_with_backend_verifier(self, recorder):
        """Should complete the flow when the backend accepts the code."""
        from farmassist_otp import BackendCodeVerifier, OTPEntryFlow, OTPFlowConfig

        def handler(request):
            return httpx.Response(200, json={"matched": True})

        async with make_client(handler) as client:
            flow = OTPEntryFlow(
                BackendCodeVerifier(client, phone="9876543210", country_code="+91"),
                config=OTPFlowConfig(success_delay_ms=0),
                **recorder.callbacks(),
            )
            flow.input_digit(0, "654321")
            attempt = await flow.submit()

        assert attempt.succeeded is True
        assert len(recorder.completions) == 1


class TestBackendResendDispatcher:
    """Tests for requesting a new code."""

    @pytest.mark.asyncio
    async def test_posts_phone(self):
        """Should post the phone number to the send endpoint."""
        from farmassist_otp import BackendResendDispatcher

        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        async with make_client(handler) as client:
            dispatcher = BackendResendDispatcher(client, phone="9876543210", country_code="+91")
            await dispatcher.request_new_code()

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/v1/auth/otp/send"
        assert json.loads(seen[0].content) == {"phoneNumber": "9876543210", "countryCode": "+91"}

    @pytest.mark.asyncio
    async def test_flow_resend_uses_dispatcher(self, spy_verifier):
        """Should call the backend once the cooldown has elapsed."""
        from farmassist_otp import BackendResendDispatcher, OTPEntryFlow, OTPFlowConfig

        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": None})

        async with make_client(handler) as client:
            flow = OTPEntryFlow(
                spy_verifier,
                dispatcher=BackendResendDispatcher(client, phone="9876543210", country_code="+91"),
                config=OTPFlowConfig(resend_cooldown_seconds=1),
            )
            assert await flow.resend() is False
            flow.tick()
            assert await flow.resend() is True

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_rejected_send_raises(self):
        """Should surface backend refusals to the caller."""
        from farmassist_otp import BackendResendDispatcher
        from farmassist_otp.http import BackendRejectedError

        def handler(request):
            return httpx.Response(429, json={"message": "Too many requests"})

        async with make_client(handler) as client:
            dispatcher = BackendResendDispatcher(client, phone="9876543210", country_code="+91")
            with pytest.raises(BackendRejectedError) as exc_info:
                await dispatcher.request_new_code()

        assert exc_info.value.status_code == 429


class TestLocalVerifiers:
    """Tests for the in-process verifiers."""

    @pytest.mark.asyncio
    async def test_fixed_code_verifier(self):
        """Should match only the expected code."""
        from farmassist_otp import FixedCodeVerifier

        verifier = FixedCodeVerifier("000000")

        assert (await verifier.verify("000000")).matched is True
        assert (await verifier.verify("111111")).matched is False

    @pytest.mark.asyncio
    async def test_accept_any_verifier(self):
        """Should accept any code."""
        from farmassist_otp import AcceptAnyVerifier

        verifier = AcceptAnyVerifier(delay_seconds=0.001)

        assert (await verifier.verify("482913")).matched is True
