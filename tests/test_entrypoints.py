from __future__ import annotations

from tqadb.entrypoints import Entrypoint
from tqadb.uris import parse_uri


def test_entrypoint_equality_ignores_uri_order() -> None:
    first = Entrypoint("acme", [parse_uri("http://a/2"), parse_uri("http://a/1")])
    second = Entrypoint("acme", {parse_uri("http://a/1"), parse_uri("http://a/2")})

    assert first == second
    assert hash(first) == hash(second)
    assert isinstance(first.doc_uris, frozenset)


def test_entrypoint_sorted_doc_uri_texts() -> None:
    entrypoint = Entrypoint("acme", [parse_uri("http://a/2"), parse_uri("http://a/1")])

    assert entrypoint.sorted_doc_uri_texts() == ["http://a/1", "http://a/2"]
