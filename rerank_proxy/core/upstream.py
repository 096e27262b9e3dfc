"""Client for the upstream TEI rerank endpoint and mapping of its responses."""
from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import List, Optional

import httpx
from pydantic import ValidationError

from rerank_proxy.errors import ErrorKind, UpstreamError
from rerank_proxy.models import (
    ClientRerankResponse,
    RankResult,
    UpstreamRerankRequest,
    UpstreamRerankResponse,
)

logger = logging.getLogger(__name__)

MAX_ERROR_EXCERPT = 200
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")


def _malformed(message: str) -> UpstreamError:
    return UpstreamError(ErrorKind.UPSTREAM_MALFORMED_RESPONSE, message)


def sanitize_excerpt(text: str, limit: int = MAX_ERROR_EXCERPT) -> str:
    """Collapse control characters and cap the length of upstream-provided text."""
    cleaned = _CONTROL_CHARS.sub(" ", text).strip()
    if len(cleaned) > limit:
        cleaned = cleaned[: limit - 3].rstrip() + "..."
    return cleaned


def _upstream_error_excerpt(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for key in ("error", "message", "detail"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return sanitize_excerpt(value)
    return None


class UpstreamReranker:
    """Send translated requests to the upstream service and map its answers.

    The ``httpx.AsyncClient`` is owned by the application and shared by every
    request; this class never mutates it.
    """

    def __init__(self, client: httpx.AsyncClient, *, endpoint: str, timeout: float) -> None:
        self._client = client
        self.url = f"{endpoint.rstrip('/')}/rerank"
        self.timeout = timeout

    async def invoke(
        self,
        upstream_request: UpstreamRerankRequest,
        top_n: Optional[int] = None,
    ) -> ClientRerankResponse:
        """Call the upstream once and return the client-shaped ranking.

        Raises ``UpstreamError`` for timeouts, transport failures, non-2xx
        answers and bodies that do not describe a full ranking of the
        submitted texts. Truncation to ``top_n`` happens only after the whole
        result set has been validated.
        """
        document_count = len(upstream_request.texts)
        response = await self._post(upstream_request)

        if not response.is_success:
            excerpt = _upstream_error_excerpt(response)
            logger.error("Upstream returned HTTP %s: %s", response.status_code, excerpt or "<no message>")
            message = f"Upstream rerank service returned HTTP {response.status_code}"
            if excerpt:
                message = f"{message}: {excerpt}"
            raise UpstreamError(ErrorKind.UPSTREAM_REJECTED, message, upstream_status=response.status_code)

        ranking = self._parse_response(response.content, document_count)
        if top_n is not None:
            ranking = ranking[:top_n]

        logger.info("Upstream rerank succeeded | documents=%d returned=%d", document_count, len(ranking))
        return ClientRerankResponse(results=ranking)

    async def _post(self, upstream_request: UpstreamRerankRequest) -> httpx.Response:
        payload = upstream_request.model_dump(mode="json")
        logger.debug("Upstream request to %s: %s", self.url, payload)
        try:
            return await asyncio.wait_for(self._client.post(self.url, json=payload), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.error("Upstream rerank timed out after %.1fs", self.timeout)
            raise UpstreamError(
                ErrorKind.UPSTREAM_TIMEOUT,
                f"Upstream rerank service did not respond within {self.timeout:g} seconds",
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Upstream rerank request failed: %s", exc)
            raise UpstreamError(
                ErrorKind.UPSTREAM_UNAVAILABLE,
                "Failed to connect to upstream rerank service",
            ) from exc

    @staticmethod
    def _parse_response(body: bytes, document_count: int) -> List[RankResult]:
        try:
            data = json.loads(body)
        except ValueError as exc:
            logger.error("Upstream body is not JSON (%d bytes)", len(body))
            raise _malformed("Upstream rerank service returned a non-JSON body") from exc

        logger.debug("Upstream response: %s", data)

        # Native TEI servers answer with a bare array.
        if isinstance(data, list):
            data = {"results": data}

        try:
            parsed = UpstreamRerankResponse.model_validate(data)
        except ValidationError as exc:
            logger.error("Upstream body has unexpected shape: %s", exc)
            raise _malformed(
                "Invalid response format from upstream rerank service, expected {results: [{index, relevance_score}]}"
            ) from exc

        seen = set()
        for item in parsed.results:
            if not 0 <= item.index < document_count:
                logger.error("Upstream index %d out of range for %d documents", item.index, document_count)
                raise _malformed(
                    f"Upstream returned index {item.index} for a request with {document_count} documents"
                )
            if item.index in seen:
                raise _malformed(f"Upstream returned index {item.index} more than once")
            seen.add(item.index)

        if len(parsed.results) != document_count:
            logger.error(
                "Upstream response length mismatch: expected %d, got %d", document_count, len(parsed.results)
            )
            raise _malformed(
                f"Upstream returned {len(parsed.results)} results for {document_count} documents"
            )

        return [RankResult(index=item.index, relevance_score=item.relevance_score) for item in parsed.results]


__all__ = ["MAX_ERROR_EXCERPT", "UpstreamReranker", "sanitize_excerpt"]
