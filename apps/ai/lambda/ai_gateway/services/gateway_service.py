"""Application service for AI gateway requests."""

import logging
from typing import Any

from ai_gateway.errors import RateLimitError
from ai_gateway.orchestration.base import GatewayOrchestrator
from ai_gateway.rate_limiter import FixedWindowRateLimiter
from ai_gateway.schemas import ChatResponse
from ai_gateway.validation import validate_chat_request

logger = logging.getLogger(__name__)


class AIGatewayService:
    """Runs rate check, validation, provider selection and invocation, in that order.

    Failures surface as GatewayError subclasses; nothing here retries an upstream call.
    """

    def __init__(
        self,
        rate_limiter: FixedWindowRateLimiter,
        orchestrator: GatewayOrchestrator,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._orchestrator = orchestrator

    def handle(self, raw_request: Any, client_key: str) -> ChatResponse:
        if not self._rate_limiter.allow(client_key):
            raise RateLimitError()

        request = validate_chat_request(raw_request)
        logger.info(
            "AI request received",
            extra={
                "provider": request.provider,
                "model": request.model,
                "message_count": len(request.messages),
            },
        )
        return self._orchestrator.run(request)
