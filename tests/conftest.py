"""Pytest configuration and shared fixtures for the rerank proxy test suite."""

from __future__ import annotations

import asyncio
import json
from contextlib import ExitStack
from typing import Any, Callable, List, Optional, Type

import httpx
import pytest
from fastapi.testclient import TestClient

from rerank_proxy.config import Settings
from rerank_proxy.main import create_app

TEI_ENDPOINT = "http://tei.test"

SAMPLE_QUERY = "eco-friendly skincare brand looking for Gen Z creators"
SAMPLE_DOCS: List[str] = [
    "Daily routines and tips for sustainable beauty, showcasing cruelty-free skincare.",
    "Zero-waste lifestyle ideas, composting, and eco home transformations.",
    "Sneaker drops, streetwear hauls, and urban fashion inspiration.",
]
SAMPLE_RESULTS: List[dict] = [
    {"index": 1, "relevance_score": 0.87},
    {"index": 0, "relevance_score": 0.42},
    {"index": 2, "relevance_score": 0.15},
]


# ---------------------------------------------------------------------------
# Upstream stub
# ---------------------------------------------------------------------------


class UpstreamStub:
    """Stand-in for the TEI server, used as an ``httpx.MockTransport`` handler."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        delay: float = 0.0,
        error: Optional[Type[httpx.TransportError]] = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = {"results": SAMPLE_RESULTS} if json_body is None and content is None else json_body
        self.content = content
        self.delay = delay
        self.error = error
        self.calls: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error("upstream unreachable", request=request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.calls[-1].content)


def build_settings(**overrides: Any) -> Settings:
    values = {
        "TEI_ENDPOINT": TEI_ENDPOINT,
        "UPSTREAM_TIMEOUT": 0.5,
        "MAX_CLIENT_BATCH_SIZE": 5,
    }
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> Settings:
    return build_settings()


@pytest.fixture()
def make_client() -> Callable[..., TestClient]:
    """Build a ``TestClient`` whose upstream traffic goes to the given stub."""

    stack = ExitStack()

    def _make(stub: UpstreamStub, **overrides: Any) -> TestClient:
        app = create_app(build_settings(**overrides), transport=httpx.MockTransport(stub))
        return stack.enter_context(TestClient(app))

    yield _make
    stack.close()


@pytest.fixture()
def upstream_client() -> Callable[[UpstreamStub], httpx.AsyncClient]:
    """Factory for bare ``httpx.AsyncClient`` objects bound to a stub."""

    def _make(stub: UpstreamStub) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(stub))

    return _make
