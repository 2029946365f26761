import unittest

from ai_gateway.errors import UnknownProviderError, UpstreamError
from ai_gateway.orchestration.direct import DirectGatewayOrchestrator
from ai_gateway.orchestration.langgraph_flow import LangGraphGatewayOrchestrator
from ai_gateway.schemas import ChatRequest, ChatResponse, Usage


class StubProvider:
    def __init__(
        self, response: ChatResponse | None = None, error: Exception | None = None
    ) -> None:
        self._response = response
        self._error = error
        self.calls: list[ChatRequest] = []

    def send(self, request: ChatRequest) -> ChatResponse:
        self.calls.append(request)
        if self._error is not None:
            raise self._error
        return self._response


class OrchestratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.request = ChatRequest(
            provider="mistral",
            credential="key",
            model="mistral-small-latest",
            messages=[{"role": "user", "content": "hello"}],
        )
        self.expected_response = ChatResponse(
            content="ok",
            provider="mistral",
            model="mistral-small-latest",
            usage=Usage(prompt_tokens=5, completion_tokens=7, total_tokens=12),
        )

    def test_direct_orchestrator_routes_to_provider(self) -> None:
        provider = StubProvider(self.expected_response)
        other = StubProvider(self.expected_response)
        orchestrator = DirectGatewayOrchestrator(providers={"mistral": provider, "openai": other})

        response = orchestrator.run(self.request)

        self.assertEqual(response, self.expected_response)
        self.assertEqual(len(provider.calls), 1)
        self.assertIs(provider.calls[0], self.request)
        self.assertEqual(other.calls, [])

    def test_direct_orchestrator_raises_for_missing_provider(self) -> None:
        orchestrator = DirectGatewayOrchestrator(providers={})

        with self.assertRaisesRegex(UnknownProviderError, "Unsupported provider: mistral"):
            orchestrator.run(self.request)

    def test_direct_orchestrator_propagates_upstream_error(self) -> None:
        provider = StubProvider(error=UpstreamError("Mistral API error: 500", upstream_status=500))
        orchestrator = DirectGatewayOrchestrator(providers={"mistral": provider})

        with self.assertRaises(UpstreamError):
            orchestrator.run(self.request)

    def test_langgraph_orchestrator_routes_to_provider(self) -> None:
        provider = StubProvider(self.expected_response)
        orchestrator = LangGraphGatewayOrchestrator(providers={"mistral": provider})

        response = orchestrator.run(self.request)

        self.assertEqual(response, self.expected_response)
        self.assertEqual(len(provider.calls), 1)
        self.assertIs(provider.calls[0], self.request)

    def test_langgraph_orchestrator_raises_for_missing_provider(self) -> None:
        orchestrator = LangGraphGatewayOrchestrator(providers={})

        with self.assertRaisesRegex(UnknownProviderError, "Unsupported provider: mistral"):
            orchestrator.run(self.request)

    def test_langgraph_orchestrator_propagates_upstream_error(self) -> None:
        provider = StubProvider(error=UpstreamError("overloaded", upstream_status=529))
        orchestrator = LangGraphGatewayOrchestrator(providers={"mistral": provider})

        with self.assertRaisesRegex(UpstreamError, "overloaded"):
            orchestrator.run(self.request)


if __name__ == "__main__":
    unittest.main()
