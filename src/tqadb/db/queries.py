"""Flat (name, docuri) queries over the entrypoint tables.

The executor here knows nothing about transactions or grouping: it runs one
parameterized join against whatever session it is handed and maps each row
to an :class:`EntrypointDocUri`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import Select, bindparam, select
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tqadb.db.models import EntrypointDocUriRecord, EntrypointRecord
from tqadb.errors import MalformedDataError, StoreAccessError
from tqadb.logging_config import log_with_fields
from tqadb.uris import DocUri, parse_uri

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntrypointDocUri:
    name: str
    doc_uri: DocUri


class DocUriRow(Protocol):
    name: Any
    docuri: Any


ALL_DOC_URIS_QUERY: Select[tuple[str, str]] = select(
    EntrypointRecord.name, EntrypointDocUriRecord.docuri
).join(EntrypointDocUriRecord, EntrypointRecord.name == EntrypointDocUriRecord.entrypoint_name)

DOC_URIS_BY_NAME_QUERY: Select[tuple[str, str]] = ALL_DOC_URIS_QUERY.where(
    EntrypointRecord.name == bindparam("name")
)


def render_sql(stmt: Select[Any], dialect: Dialect | None = None) -> str:
    return str(stmt.compile(dialect=dialect))


def map_doc_uri_row(row: DocUriRow) -> EntrypointDocUri:
    name = row.name
    if not isinstance(name, str):
        raise MalformedDataError(f"Entrypoint name must be text, got {name!r}", value=name)
    docuri = row.docuri
    if not isinstance(docuri, str):
        raise MalformedDataError(
            f"Docuri of entrypoint {name!r} must be text, got {docuri!r}", value=docuri
        )
    return EntrypointDocUri(name=name, doc_uri=parse_uri(docuri))


class EntrypointDocUriQueries:
    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch_all_doc_uri_rows(self) -> list[EntrypointDocUri]:
        return self._fetch(ALL_DOC_URIS_QUERY)

    def fetch_doc_uri_rows_by_name(self, name: str) -> list[EntrypointDocUri]:
        return self._fetch(DOC_URIS_BY_NAME_QUERY, {"name": name})

    def _fetch(
        self, stmt: Select[tuple[str, str]], params: Mapping[str, Any] | None = None
    ) -> list[EntrypointDocUri]:
        try:
            # Drain the cursor before mapping so it is released even if a row is bad.
            rows = self.session.execute(stmt, params).all()
        except SQLAlchemyError as exc:
            log_with_fields(
                logger,
                logging.ERROR,
                "entrypoint docuri query failed",
                error=type(exc).__name__,
                filtered=params is not None,
            )
            raise StoreAccessError(f"Failed to query entrypoint docuris: {exc}") from exc

        mapped = [map_doc_uri_row(row) for row in rows]
        log_with_fields(logger, logging.DEBUG, "fetched entrypoint docuri rows", rows=len(mapped))
        return mapped
