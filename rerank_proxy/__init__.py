"""Translation gateway between the documents rerank dialect and TEI rerank servers."""

__version__ = "0.1.0"
