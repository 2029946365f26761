"""AI gateway backend using FastAPI + Mangum for AWS Lambda."""

import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mangum import Mangum

from ai_gateway.constants import INVALID_REQUEST_MESSAGE, UNKNOWN_CLIENT_KEY
from ai_gateway.errors import to_error_response
from ai_gateway.infra.runtime import (
    build_orchestrator,
    build_providers,
    configure_logging,
    get_rate_limiter,
)
from ai_gateway.provider_registry import PROVIDER_INFO
from ai_gateway.schemas import ProviderMetadata
from ai_gateway.services.gateway_service import AIGatewayService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

configure_logging()

app = FastAPI()
router = APIRouter(prefix="/api")

AI_ROUTE_PATH = "/api/ai"


@lru_cache(maxsize=1)
def get_gateway_service() -> AIGatewayService:
    return AIGatewayService(
        rate_limiter=get_rate_limiter(),
        orchestrator=build_orchestrator(build_providers()),
    )


def resolve_client_key(request: Request) -> str:
    """Client identity for rate limiting: first forwarded hop, then real IP, then peer."""
    first_hop = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if first_hop:
        return first_hop
    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_KEY


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Unparseable JSON bodies land here before the route runs.
    logger.info("Rejected unparseable request body", extra={"path": request.url.path})
    if request.url.path == AI_ROUTE_PATH:
        # Still rate-checked; the service rejects the missing payload with 400.
        return dispatch_ai_request(request, None)
    return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})


def dispatch_ai_request(request: Request, payload: Any) -> JSONResponse:
    client_key = resolve_client_key(request)
    try:
        response = get_gateway_service().handle(payload, client_key)
    except Exception as e:
        status_code, body = to_error_response(e)
        return JSONResponse(status_code=status_code, content=body)
    return JSONResponse(content=response.to_body())


@router.post("/ai")
def ai_chat(request: Request, payload: Any = Body(default=None)) -> JSONResponse:
    """Forward a provider-agnostic chat request to the selected vendor."""
    return dispatch_ai_request(request, payload)


@router.get("/providers")
def list_providers() -> list[dict[str, Any]]:
    """Return supported providers and their default models."""
    return [
        ProviderMetadata(
            id=provider_id,
            name=info.name,
            default_model=info.default_model,
            api_style=info.api_style,
        ).model_dump(by_alias=True)
        for provider_id, info in PROVIDER_INFO.items()
    ]


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
