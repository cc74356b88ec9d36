from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import Engine, insert, select
from sqlalchemy.orm import Session

from tqadb.db import ReadOnlyTransactionRunner, create_engine, create_sessionmaker, init_schema
from tqadb.db.models import EntrypointDocUriRecord, EntrypointRecord
from tqadb.repos import EntrypointRepository

SeedRows = Callable[[list[tuple[str, str]]], None]


@pytest.fixture
def test_engine(tmp_path: Path) -> Iterator[Engine]:
    db_path = tmp_path / "test.db"
    engine = create_engine(f"sqlite:///{db_path}")
    init_schema(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def db_session(test_engine: Engine) -> Iterator[Session]:
    with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def seed_rows(test_engine: Engine) -> SeedRows:
    """Insert raw (name, docuri) pairs, creating entrypoint rows as needed."""

    def _seed(rows: list[tuple[str, str]]) -> None:
        names = list(dict.fromkeys(name for name, _ in rows))
        with test_engine.begin() as conn:
            existing = set(conn.scalars(select(EntrypointRecord.name)))
            new_names = [name for name in names if name not in existing]
            if new_names:
                conn.execute(insert(EntrypointRecord), [{"name": name} for name in new_names])
            if rows:
                conn.execute(
                    insert(EntrypointDocUriRecord),
                    [{"entrypoint_name": name, "docuri": docuri} for name, docuri in rows],
                )

    return _seed


@pytest.fixture
def repo(test_engine: Engine) -> EntrypointRepository:
    return EntrypointRepository(ReadOnlyTransactionRunner(test_engine))
