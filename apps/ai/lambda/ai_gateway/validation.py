"""Inbound request validation."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import ChatRequest

logger = logging.getLogger(__name__)

# Reported in this order when several checks fail at once.
_CHECK_ORDER = ("provider", "credential", "model", "messages")


def _first_failed_field(exc: PydanticValidationError) -> str:
    locations = [str(error["loc"][0]) if error["loc"] else "" for error in exc.errors()]
    for field in _CHECK_ORDER:
        if field in locations or (field == "credential" and "apiKey" in locations):
            return field
    return locations[0] if locations else "body"


def validate_chat_request(raw: Any) -> ChatRequest:
    """Return a ChatRequest built from ``raw`` or raise ValidationError.

    Field values are passed through untouched; only the shape is checked.
    """
    if not isinstance(raw, Mapping):
        logger.info("Rejected chat request", extra={"invalid_field": "body"})
        raise ValidationError("body")

    try:
        return ChatRequest.model_validate(dict(raw))
    except PydanticValidationError as e:
        field = _first_failed_field(e)
        logger.info("Rejected chat request", extra={"invalid_field": field})
        # pydantic errors echo the raw input, which includes the credential.
        raise ValidationError(field) from None
