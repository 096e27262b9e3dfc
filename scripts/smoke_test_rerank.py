#!/usr/bin/env python3
"""Quick smoke test against a running rerank proxy."""
from __future__ import annotations

import argparse
import json
import os

from rerank_proxy.client import RerankProxyClient

SAMPLE_QUERY = "What is the capital of France?"
SAMPLE_DOCS = [
    "Berlin is the capital of Germany.",
    "Paris is the capital and most populous city of France.",
    "The Eiffel Tower is located in Paris.",
]


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--url",
        default=os.getenv("RERANK_PROXY_URL", "http://localhost:8000"),
        help="Base URL of the rerank proxy",
    )
    parser.add_argument("--top-n", type=int, default=None)
    args = parser.parse_args()

    client = RerankProxyClient(args.url)
    print(json.dumps(client.health(), indent=2))

    ranking = client.rerank(SAMPLE_QUERY, SAMPLE_DOCS, top_n=args.top_n)
    payload = [
        {"index": index, "relevance_score": score, "document": SAMPLE_DOCS[index]}
        for index, score in ranking
    ]
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
