"""Dependency wiring for the rerank proxy."""

from fastapi import Request

from rerank_proxy.config import Settings
from rerank_proxy.core import UpstreamReranker


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return request.app.state.settings


def get_upstream_reranker(request: Request) -> UpstreamReranker:
    """Wrap the shared upstream HTTP client for the current request."""
    settings: Settings = request.app.state.settings
    return UpstreamReranker(
        request.app.state.http_client,
        endpoint=str(settings.TEI_ENDPOINT),
        timeout=settings.UPSTREAM_TIMEOUT,
    )
