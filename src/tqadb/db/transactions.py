"""Read scopes for the repositories.

A repository never opens sessions itself; it hands a read function to a
:class:`TransactionRunner`, which decides whether that read runs inside its
own read-only transaction or inside a session the caller already owns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tqadb.db.session import create_sessionmaker
from tqadb.errors import StoreAccessError
from tqadb.logging_config import log_with_fields
from tqadb.settings import Settings

T = TypeVar("T")

logger = logging.getLogger(__name__)


class TransactionRunner(Protocol):
    def run_read_only(self, fn: Callable[[Session], T]) -> T: ...


def read_only_execution_options(engine: Engine, isolation_level: str | None = None) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if engine.dialect.name == "postgresql":
        options["postgresql_readonly"] = True
    if isolation_level:
        options["isolation_level"] = isolation_level
    return options


class ReadOnlyTransactionRunner:
    """Runs each read in a fresh session and a transaction of its own.

    The transaction commits when ``fn`` returns and rolls back when it raises;
    the exception is re-raised either way. Driver errors coming out of
    connect, begin or commit are re-raised as :class:`StoreAccessError`.
    """

    def __init__(self, engine: Engine, *, isolation_level: str | None = None) -> None:
        options = read_only_execution_options(engine, isolation_level)
        self.engine = engine.execution_options(**options) if options else engine
        self.isolation_level = isolation_level
        self._sessionmaker = create_sessionmaker(self.engine)

    def run_read_only(self, fn: Callable[[Session], T]) -> T:
        session = self._sessionmaker()
        try:
            with session.begin():
                return fn(session)
        except SQLAlchemyError as exc:
            log_with_fields(
                logger,
                logging.ERROR,
                "read-only transaction failed",
                error=type(exc).__name__,
            )
            raise StoreAccessError(f"Read-only transaction failed: {exc}") from exc
        except Exception as exc:
            log_with_fields(
                logger,
                logging.WARNING,
                "read-only transaction rolled back",
                error=type(exc).__name__,
            )
            raise
        finally:
            session.close()


class SessionRunner:
    """Runs reads against a caller-owned session without a transaction of its own.

    Commit and rollback stay with whoever owns the session.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def run_read_only(self, fn: Callable[[Session], T]) -> T:
        try:
            return fn(self.session)
        except SQLAlchemyError as exc:
            raise StoreAccessError(f"Read failed: {exc}") from exc


def build_runner(engine: Engine, settings: Settings) -> ReadOnlyTransactionRunner:
    return ReadOnlyTransactionRunner(engine, isolation_level=settings.read_isolation_level)
