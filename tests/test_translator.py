"""Tests for request validation and translation."""
from __future__ import annotations

import pytest

from rerank_proxy.core import validate_and_translate
from rerank_proxy.errors import ClientInputError, ErrorKind
from rerank_proxy.models import ClientRerankRequest, UpstreamRerankRequest
from tests.conftest import SAMPLE_DOCS, SAMPLE_QUERY


def _kind_of(request: ClientRerankRequest, max_batch_size: int = 10) -> ErrorKind:
    with pytest.raises(ClientInputError) as excinfo:
        validate_and_translate(request, max_batch_size)
    return excinfo.value.kind


def test_translates_query_and_documents():
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=SAMPLE_DOCS, model="bge-reranker", top_n=2)
    upstream = validate_and_translate(request, 10)

    assert upstream == UpstreamRerankRequest(query=SAMPLE_QUERY, texts=SAMPLE_DOCS)
    assert upstream.model_dump() == {"query": SAMPLE_QUERY, "texts": SAMPLE_DOCS}


def test_text_is_forwarded_untouched():
    request = ClientRerankRequest(query="  Café  ", documents=["  Ünïcode\n", ""])
    upstream = validate_and_translate(request, 10)

    assert upstream.query == "  Café  "
    assert upstream.texts == ["  Ünïcode\n", ""]


def test_translation_is_repeatable():
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=SAMPLE_DOCS)
    first = validate_and_translate(request, 10)
    second = validate_and_translate(request, 10)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("query", [None, "", "   ", "\t\n"])
def test_empty_query(query):
    assert _kind_of(ClientRerankRequest(query=query, documents=SAMPLE_DOCS)) is ErrorKind.EMPTY_QUERY


@pytest.mark.parametrize("documents", [None, []])
def test_empty_documents(documents):
    assert _kind_of(ClientRerankRequest(query=SAMPLE_QUERY, documents=documents)) is ErrorKind.EMPTY_DOCUMENTS


def test_batch_too_large_reports_both_counts():
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=["doc"] * 7)
    with pytest.raises(ClientInputError) as excinfo:
        validate_and_translate(request, 5)

    assert excinfo.value.kind is ErrorKind.BATCH_TOO_LARGE
    assert "7" in excinfo.value.message
    assert "5" in excinfo.value.message


def test_batch_at_limit_is_accepted():
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=["doc"] * 5)
    assert len(validate_and_translate(request, 5).texts) == 5


@pytest.mark.parametrize("top_n", [0, -1, -100])
def test_non_positive_top_n(top_n):
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=SAMPLE_DOCS, top_n=top_n)
    assert _kind_of(request) is ErrorKind.INVALID_TOP_N


def test_top_n_larger_than_documents_is_accepted():
    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=SAMPLE_DOCS, top_n=50)
    assert validate_and_translate(request, 10).texts == SAMPLE_DOCS


def test_first_failing_rule_wins():
    request = ClientRerankRequest(query=" ", documents=["doc"] * 20, top_n=0)
    assert _kind_of(request, max_batch_size=5) is ErrorKind.EMPTY_QUERY

    request = ClientRerankRequest(query=SAMPLE_QUERY, documents=["doc"] * 20, top_n=0)
    assert _kind_of(request, max_batch_size=5) is ErrorKind.BATCH_TOO_LARGE
