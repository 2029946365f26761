import unittest
from unittest.mock import Mock

from ai_gateway.errors import (
    RateLimitError,
    UnknownProviderError,
    UpstreamError,
    ValidationError,
    to_error_response,
)
from ai_gateway.orchestration.direct import DirectGatewayOrchestrator
from ai_gateway.rate_limiter import FixedWindowRateLimiter
from ai_gateway.schemas import ChatRequest, ChatResponse
from ai_gateway.services.gateway_service import AIGatewayService

VALID_PAYLOAD = {
    "provider": "anthropic",
    "credential": "sk-ant-secret",
    "model": "claude-3-haiku-20240307",
    "messages": [{"role": "user", "content": "hello"}],
}


class AIGatewayServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rate_limiter = Mock(spec=FixedWindowRateLimiter)
        self.rate_limiter.allow.return_value = True
        self.orchestrator = Mock()
        self.orchestrator.run.return_value = ChatResponse(
            content="assistant reply", provider="anthropic", model="claude-3-haiku-20240307"
        )
        self.service = AIGatewayService(
            rate_limiter=self.rate_limiter, orchestrator=self.orchestrator
        )

    def test_handle_validates_and_delegates_to_orchestrator(self) -> None:
        response = self.service.handle(VALID_PAYLOAD, "10.0.0.1")

        self.assertEqual(response.content, "assistant reply")
        self.rate_limiter.allow.assert_called_once_with("10.0.0.1")
        self.orchestrator.run.assert_called_once()
        (called_request,) = self.orchestrator.run.call_args.args
        self.assertIsInstance(called_request, ChatRequest)
        self.assertEqual(called_request.provider, "anthropic")
        self.assertEqual(called_request.credential, "sk-ant-secret")

    def test_rate_check_runs_before_validation(self) -> None:
        self.rate_limiter.allow.return_value = False

        with self.assertRaises(RateLimitError):
            self.service.handle({"garbage": True}, "10.0.0.1")

        self.orchestrator.run.assert_not_called()

    def test_invalid_request_never_reaches_orchestrator(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.handle(dict(VALID_PAYLOAD, messages=[]), "10.0.0.1")

        self.orchestrator.run.assert_not_called()

    def test_invalid_requests_still_count_against_rate_limit(self) -> None:
        service = AIGatewayService(
            rate_limiter=FixedWindowRateLimiter(max_requests=2),
            orchestrator=self.orchestrator,
        )
        for _ in range(2):
            with self.assertRaises(ValidationError):
                service.handle({}, "10.0.0.2")

        with self.assertRaises(RateLimitError):
            service.handle(VALID_PAYLOAD, "10.0.0.2")

    def test_unknown_provider_surfaces_from_orchestrator(self) -> None:
        service = AIGatewayService(
            rate_limiter=self.rate_limiter,
            orchestrator=DirectGatewayOrchestrator(providers={}),
        )

        with self.assertRaises(UnknownProviderError):
            service.handle(VALID_PAYLOAD, "10.0.0.1")

    def test_upstream_error_propagates(self) -> None:
        self.orchestrator.run.side_effect = UpstreamError("Anthropic API error: 500", 500)

        with self.assertRaisesRegex(UpstreamError, "Anthropic API error: 500"):
            self.service.handle(VALID_PAYLOAD, "10.0.0.1")


class ToErrorResponseTests(unittest.TestCase):
    def test_gateway_errors_map_to_their_status(self) -> None:
        cases = [
            (ValidationError("model"), 400),
            (RateLimitError(), 429),
            (UnknownProviderError("cohere"), 400),
            (UpstreamError("Google API error: 503", upstream_status=503), 502),
        ]
        for exc, expected_status in cases:
            with self.subTest(error=type(exc).__name__):
                status_code, body = to_error_response(exc)
                self.assertEqual(status_code, expected_status)
                self.assertEqual(body, {"error": exc.message})

    def test_rate_limit_body(self) -> None:
        self.assertEqual(
            to_error_response(RateLimitError()),
            (429, {"error": "Rate limit exceeded. Please try again later."}),
        )

    def test_unexpected_error_is_not_echoed(self) -> None:
        with self.assertLogs("ai_gateway.errors", level="ERROR"):
            status_code, body = to_error_response(KeyError("choices"))

        self.assertEqual(status_code, 502)
        self.assertNotIn("choices", body["error"])


if __name__ == "__main__":
    unittest.main()
