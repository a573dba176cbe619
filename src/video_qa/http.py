"""HTTP helpers that translate transport and payload failures into pipeline errors."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.utils.logging import get_logger

from .errors import NetworkError, ProtocolError, RemoteRequestError, Stage

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    service: str,
    stage: Stage,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body.

    Args:
        client: Shared AsyncClient.
        method: HTTP method.
        url: Absolute request URL.
        service: Human-readable service name used in error messages.
        stage: Pipeline stage attached to any raised error.
        **kwargs: Passed through to ``client.request`` (params, json, files, ...).

    Returns:
        Decoded JSON payload.

    Raises:
        NetworkError: If the request fails at the transport level.
        RemoteRequestError: If the response status is not 2xx.
        ProtocolError: If the body is not valid JSON.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.RequestError as e:
        logger.error(
            "http_request_failed",
            service=service,
            stage=str(stage),
            error_type=type(e).__name__,
        )
        raise NetworkError(f"{service} request failed: {e}", stage) from e

    if not response.is_success:
        logger.warning(
            "http_request_rejected",
            service=service,
            stage=str(stage),
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        raise RemoteRequestError(service, response.status_code, response.text, stage)

    try:
        return response.json()
    except ValueError as e:
        raise ProtocolError(f"Failed to parse {service} response as JSON", stage) from e


def parse_model(model: type[ModelT], payload: Any, *, service: str, stage: Stage) -> ModelT:
    """Validate a JSON payload against a wire model.

    Raises:
        ProtocolError: If required fields are missing or have the wrong type.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProtocolError(
            f"Unexpected {service} response: {e.error_count()} invalid field(s)", stage
        ) from e
