from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Set
from typing import Protocol

from sqlalchemy.orm import Session

from tqadb.db.queries import EntrypointDocUri, EntrypointDocUriQueries
from tqadb.db.transactions import TransactionRunner
from tqadb.entrypoints import Entrypoint
from tqadb.logging_config import log_with_fields, operation_scope
from tqadb.uris import DocUri

logger = logging.getLogger(__name__)


class EntrypointRepo(Protocol):
    def find_all_entrypoints(self) -> list[Entrypoint]: ...

    def find_entrypoint_by_name(self, name: str) -> Entrypoint | None: ...

    def find_entrypoint_by_doc_uris(self, doc_uris: Set[DocUri]) -> Entrypoint | None: ...


def group_entrypoints(rows: Iterable[EntrypointDocUri]) -> list[Entrypoint]:
    grouped: defaultdict[str, set[DocUri]] = defaultdict(set)
    for row in rows:
        grouped[row.name].add(row.doc_uri)
    return [Entrypoint(name, doc_uris) for name, doc_uris in grouped.items()]


def _find_all(session: Session) -> list[Entrypoint]:
    entrypoints = group_entrypoints(EntrypointDocUriQueries(session).fetch_all_doc_uri_rows())
    log_with_fields(logger, logging.DEBUG, "grouped entrypoints", entrypoints=len(entrypoints))
    return entrypoints


def _find_by_name(session: Session, name: str) -> Entrypoint | None:
    entrypoints = group_entrypoints(EntrypointDocUriQueries(session).fetch_doc_uri_rows_by_name(name))
    return entrypoints[0] if entrypoints else None


def _find_by_doc_uris(session: Session, doc_uris: frozenset[DocUri]) -> Entrypoint | None:
    # Full scan; names are unique so at most one entrypoint can match exactly.
    return next((ep for ep in _find_all(session) if ep.doc_uris == doc_uris), None)


class EntrypointRepository:
    """Read-only access to entrypoints, one read-only scope per call."""

    def __init__(self, runner: TransactionRunner) -> None:
        self.runner = runner

    def find_all_entrypoints(self) -> list[Entrypoint]:
        with operation_scope("find_all_entrypoints"):
            return self.runner.run_read_only(_find_all)

    def find_entrypoint_by_name(self, name: str) -> Entrypoint | None:
        with operation_scope("find_entrypoint_by_name"):
            return self.runner.run_read_only(lambda session: _find_by_name(session, name))

    def find_entrypoint_by_doc_uris(self, doc_uris: Set[DocUri]) -> Entrypoint | None:
        wanted = frozenset(doc_uris)
        with operation_scope("find_entrypoint_by_doc_uris"):
            return self.runner.run_read_only(lambda session: _find_by_doc_uris(session, wanted))
