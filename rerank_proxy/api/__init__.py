"""API routing for the rerank proxy."""

from fastapi import APIRouter

from rerank_proxy.api import rerank

api_router = APIRouter()
api_router.include_router(rerank.router, tags=["Rerank"])

__all__ = ["api_router"]
