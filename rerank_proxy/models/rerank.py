"""Pydantic models for the client and upstream rerank dialects."""
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt


class ClientRerankRequest(BaseModel):
    """Body of ``POST /rerank`` as sent by clients.

    ``query`` and ``documents`` are optional here so that missing values are
    reported by the translator with a precise error kind instead of a generic
    parse failure.
    """

    model_config = ConfigDict(frozen=True)

    query: Optional[str] = Field(default=None, description="Search query to rank against")
    documents: Optional[List[str]] = Field(default=None, description="Candidate documents, in order")
    model: Optional[str] = Field(default=None, description="Accepted for compatibility, not forwarded")
    top_n: Optional[StrictInt] = Field(default=None, description="Maximum number of results to return")


class UpstreamRerankRequest(BaseModel):
    """Body of the upstream ``POST /rerank`` call."""

    model_config = ConfigDict(frozen=True)

    query: str
    texts: List[str]


class RankResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    relevance_score: float


class UpstreamRankResult(BaseModel):
    """Single upstream entry; TEI names the score ``score``.

    Strict: numeric strings and booleans are not a ranking, and scores must be finite.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    index: int
    relevance_score: float = Field(
        validation_alias=AliasChoices("relevance_score", "score"),
        allow_inf_nan=False,
    )


class UpstreamRerankResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[UpstreamRankResult]


class ClientRerankResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[RankResult]


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str
    message: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "rerank-proxy"
