"""Core translation pipeline for the rerank proxy."""

from .translator import validate_and_translate
from .upstream import UpstreamReranker

__all__ = ["UpstreamReranker", "validate_and_translate"]
