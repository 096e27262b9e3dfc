"""Pydantic models for the rerank proxy."""

from .rerank import (
    ClientRerankRequest,
    ClientRerankResponse,
    ErrorEnvelope,
    HealthResponse,
    RankResult,
    UpstreamRankResult,
    UpstreamRerankRequest,
    UpstreamRerankResponse,
)

__all__ = [
    "ClientRerankRequest",
    "ClientRerankResponse",
    "ErrorEnvelope",
    "HealthResponse",
    "RankResult",
    "UpstreamRankResult",
    "UpstreamRerankRequest",
    "UpstreamRerankResponse",
]
