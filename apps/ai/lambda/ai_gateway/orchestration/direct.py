"""Direct provider dispatch orchestration."""

from collections.abc import Mapping

from ai_gateway.errors import UnknownProviderError
from ai_gateway.orchestration.base import GatewayOrchestrator
from ai_gateway.providers.base import ChatProvider
from ai_gateway.schemas import ChatRequest, ChatResponse


class DirectGatewayOrchestrator(GatewayOrchestrator):
    def __init__(self, providers: Mapping[str, ChatProvider]) -> None:
        self._providers = providers

    def run(self, request: ChatRequest) -> ChatResponse:
        provider = self._providers.get(request.provider)
        if provider is None:
            raise UnknownProviderError(request.provider)
        return provider.send(request)
