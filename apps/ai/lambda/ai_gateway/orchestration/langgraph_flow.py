"""LangGraph-based orchestration strategy for provider dispatch."""

from collections.abc import Mapping
from typing import NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from ai_gateway.errors import UnknownProviderError
from ai_gateway.providers.base import ChatProvider
from ai_gateway.schemas import ChatRequest, ChatResponse

from .base import GatewayOrchestrator


class GatewayGraphState(TypedDict):
    request: ChatRequest
    provider_id: NotRequired[str]
    response: NotRequired[ChatResponse]


class LangGraphGatewayOrchestrator(GatewayOrchestrator):
    def __init__(self, providers: Mapping[str, ChatProvider]) -> None:
        self._providers = providers
        graph = StateGraph(GatewayGraphState)
        graph.add_node("select_provider", self._select_provider)
        graph.add_node("invoke_provider", self._invoke_provider)
        graph.add_edge(START, "select_provider")
        graph.add_edge("select_provider", "invoke_provider")
        graph.add_edge("invoke_provider", END)
        self._graph = graph.compile()

    def _select_provider(self, state: GatewayGraphState) -> dict[str, str]:
        provider_id = state["request"].provider
        if provider_id not in self._providers:
            raise UnknownProviderError(provider_id)
        return {"provider_id": provider_id}

    def _invoke_provider(self, state: GatewayGraphState) -> dict[str, ChatResponse]:
        provider = self._providers[state["provider_id"]]
        return {"response": provider.send(state["request"])}

    def run(self, request: ChatRequest) -> ChatResponse:
        initial_state: GatewayGraphState = {"request": request}
        result = cast("GatewayGraphState", self._graph.invoke(initial_state))
        response = result.get("response")
        if response is None:
            raise RuntimeError("LangGraph execution did not return a provider response")
        return response
