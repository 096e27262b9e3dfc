"""Error taxonomy for the rerank proxy.

Every failure a client can observe is one ``ErrorKind``. Each kind maps to
exactly one HTTP status through ``STATUS_CODES``; the table is checked for
completeness when this module is imported so that adding a kind without a
status fails loudly.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict

from rerank_proxy.models import ErrorEnvelope


class ErrorKind(str, Enum):
    """Closed set of error identifiers rendered in the ``error`` field."""

    # Client input
    EMPTY_QUERY = "empty_query"
    EMPTY_DOCUMENTS = "empty_documents"
    BATCH_TOO_LARGE = "batch_too_large"
    INVALID_TOP_N = "invalid_top_n"
    INVALID_JSON = "invalid_json"

    # Upstream
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_REJECTED = "upstream_rejected"
    UPSTREAM_MALFORMED_RESPONSE = "upstream_malformed_response"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"

    # Routing / server
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    INTERNAL_ERROR = "internal_error"


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.EMPTY_QUERY: 400,
    ErrorKind.EMPTY_DOCUMENTS: 400,
    ErrorKind.BATCH_TOO_LARGE: 400,
    ErrorKind.INVALID_TOP_N: 400,
    ErrorKind.INVALID_JSON: 400,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
    ErrorKind.UPSTREAM_REJECTED: 502,
    ErrorKind.UPSTREAM_MALFORMED_RESPONSE: 502,
    ErrorKind.UPSTREAM_UNAVAILABLE: 502,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.INTERNAL_ERROR: 500,
}

_missing = set(ErrorKind) - set(STATUS_CODES)
if _missing:
    raise RuntimeError(f"ErrorKind values without an HTTP status: {sorted(k.value for k in _missing)}")


def status_for(kind: ErrorKind) -> int:
    return STATUS_CODES[kind]


class RerankProxyError(Exception):
    """Base class for failures rendered as an ``ErrorEnvelope``."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return status_for(self.kind)

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.kind.value, message=self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ClientInputError(RerankProxyError):
    """Raised when the client request is rejected before any upstream call."""


class UpstreamError(RerankProxyError):
    """Raised when the upstream call fails or returns unusable data."""

    def __init__(self, kind: ErrorKind, message: str, *, upstream_status: int | None = None) -> None:
        super().__init__(kind, message)
        self.upstream_status = upstream_status


__all__ = [
    "ClientInputError",
    "ErrorKind",
    "RerankProxyError",
    "STATUS_CODES",
    "UpstreamError",
    "status_for",
]
