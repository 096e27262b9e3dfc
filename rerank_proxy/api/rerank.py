"""Rerank endpoint translating client requests to the upstream dialect."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from rerank_proxy.config import Settings
from rerank_proxy.core import UpstreamReranker, validate_and_translate
from rerank_proxy.dependencies import get_settings, get_upstream_reranker
from rerank_proxy.errors import ClientInputError, ErrorKind, RerankProxyError
from rerank_proxy.models import ClientRerankRequest, ClientRerankResponse, ErrorEnvelope

router = APIRouter()

logger = logging.getLogger(__name__)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope, "description": "Invalid client request"},
    502: {"model": ErrorEnvelope, "description": "Upstream rejected the request or answered with bad data"},
    504: {"model": ErrorEnvelope, "description": "Upstream did not answer in time"},
}


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"Invalid request body: {location}: {first.get('msg', 'invalid value')}"


async def _parse_request(request: Request) -> ClientRerankRequest:
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ClientInputError(ErrorKind.INVALID_JSON, "Invalid JSON in request body") from exc

    if not isinstance(payload, dict):
        raise ClientInputError(ErrorKind.INVALID_JSON, "Request body must be a JSON object")

    try:
        return ClientRerankRequest.model_validate(payload)
    except ValidationError as exc:
        if all(error.get("loc", ())[:1] == ("top_n",) for error in exc.errors()):
            raise ClientInputError(
                ErrorKind.INVALID_TOP_N,
                f"top_n must be a positive integer, got {payload.get('top_n')!r}",
            ) from exc
        raise ClientInputError(ErrorKind.INVALID_JSON, _describe_validation_error(exc)) from exc


@router.post("/rerank", response_model=ClientRerankResponse, responses=_ERROR_RESPONSES)
async def rerank_documents(
    request: Request,
    settings: Settings = Depends(get_settings),
    reranker: UpstreamReranker = Depends(get_upstream_reranker),
) -> ClientRerankResponse:
    client_request = await _parse_request(request)
    logger.info(
        "Processing rerank request | documents=%s top_n=%s model=%s",
        len(client_request.documents or []),
        client_request.top_n,
        client_request.model,
    )
    logger.debug("Rerank query: %r", client_request.query)

    try:
        upstream_request = validate_and_translate(client_request, settings.MAX_CLIENT_BATCH_SIZE)
        response = await reranker.invoke(upstream_request, client_request.top_n)
    except RerankProxyError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected rerank error: %s", exc)
        raise RerankProxyError(ErrorKind.INTERNAL_ERROR, "Internal Server Error") from exc

    logger.info("Rerank request complete | results=%d", len(response.results))
    return response
