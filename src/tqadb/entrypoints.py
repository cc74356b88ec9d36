from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tqadb.uris import DocUri, format_uri


@dataclass(frozen=True, slots=True)
class Entrypoint:
    """A named group of document URIs, rebuilt from the store on every read."""

    name: str
    doc_uris: frozenset[DocUri]

    def __init__(self, name: str, doc_uris: Iterable[DocUri]) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "doc_uris", frozenset(doc_uris))

    def sorted_doc_uri_texts(self) -> list[str]:
        return sorted(format_uri(uri) for uri in self.doc_uris)
