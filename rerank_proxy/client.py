"""HTTP client for services that call the rerank proxy."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import requests


class RerankClientError(RuntimeError):
    """Raised when the proxy answers with an error envelope or cannot be reached."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, kind: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class RerankProxyClient:
    """Lightweight wrapper around the proxy's REST endpoints."""

    def __init__(self, base_url: str, *, timeout: float = 60, session: Optional[requests.Session] = None) -> None:
        base_url = str(base_url or "").rstrip("/")
        if not base_url:
            raise RerankClientError("Rerank proxy URL is not configured")
        self.url = base_url
        self.timeout = timeout
        self._session = session or requests.Session()

    def health(self) -> Dict[str, Any]:
        response = self._session.get(f"{self.url}/health", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def rerank(
        self,
        query: str,
        documents: List[str],
        top_n: Optional[int] = None,
        model: Optional[str] = None,
    ) -> List[Tuple[int, float]]:
        """Return ``(index, relevance_score)`` pairs, best match first."""
        payload: Dict[str, Any] = {"query": query, "documents": documents}
        if top_n is not None:
            payload["top_n"] = top_n
        if model is not None:
            payload["model"] = model

        try:
            response = self._session.post(f"{self.url}/rerank", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RerankClientError(f"Rerank proxy unreachable: {exc}") from exc

        if not response.ok:
            kind, message = self._error_details(response)
            raise RerankClientError(
                f"Rerank request failed ({response.status_code}): {message}",
                status_code=response.status_code,
                kind=kind,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise RerankClientError("Rerank proxy returned a non-JSON body", status_code=response.status_code) from exc
        entries = data.get("results") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise RerankClientError(
                "Rerank proxy response is missing a results list", status_code=response.status_code
            )
        return [(int(item["index"]), float(item["relevance_score"])) for item in entries]

    @staticmethod
    def _error_details(response: requests.Response) -> Tuple[Optional[str], str]:
        try:
            envelope = response.json()
        except ValueError:
            return None, response.reason or "unknown error"
        if isinstance(envelope, dict):
            return envelope.get("error"), str(envelope.get("message") or envelope.get("error") or "unknown error")
        return None, "unknown error"


__all__ = ["RerankClientError", "RerankProxyClient"]
