"""Validation and translation of client rerank requests."""
from __future__ import annotations

import logging

from rerank_proxy.errors import ClientInputError, ErrorKind
from rerank_proxy.models import ClientRerankRequest, UpstreamRerankRequest

logger = logging.getLogger(__name__)


def validate_and_translate(request: ClientRerankRequest, max_batch_size: int) -> UpstreamRerankRequest:
    """Check ``request`` and project it onto the upstream ``{query, texts}`` shape.

    Rules run in order and the first failure is raised as ``ClientInputError``:
    empty query, empty documents, too many documents, non-positive ``top_n``.
    The query and documents are forwarded unchanged; ``model`` and ``top_n``
    stay on the proxy side.
    """
    query = request.query
    if query is None or not query.strip():
        logger.warning("Rejected rerank request: empty query")
        raise ClientInputError(ErrorKind.EMPTY_QUERY, "Query cannot be empty")

    documents = request.documents
    if not documents:
        logger.warning("Rejected rerank request: no documents")
        raise ClientInputError(ErrorKind.EMPTY_DOCUMENTS, "Documents list cannot be empty")

    if len(documents) > max_batch_size:
        logger.warning("Rejected rerank request: %d documents exceeds limit %d", len(documents), max_batch_size)
        raise ClientInputError(
            ErrorKind.BATCH_TOO_LARGE,
            f"Too many documents: got {len(documents)}, max: {max_batch_size}",
        )

    if request.top_n is not None and request.top_n <= 0:
        logger.warning("Rejected rerank request: top_n=%s", request.top_n)
        raise ClientInputError(
            ErrorKind.INVALID_TOP_N,
            f"top_n must be a positive integer, got {request.top_n}",
        )

    return UpstreamRerankRequest(query=query, texts=list(documents))


__all__ = ["validate_and_translate"]
