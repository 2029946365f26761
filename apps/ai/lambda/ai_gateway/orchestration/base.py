"""Orchestration interfaces for provider dispatch."""

from typing import Protocol

from ai_gateway.schemas import ChatRequest, ChatResponse


class GatewayOrchestrator(Protocol):
    def run(self, request: ChatRequest) -> ChatResponse:
        """Select the adapter for ``request.provider`` and invoke it."""
