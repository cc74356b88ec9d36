from __future__ import annotations

from tqadb.db.session import create_engine, create_sessionmaker, init_schema
from tqadb.db.transactions import (
    ReadOnlyTransactionRunner,
    SessionRunner,
    TransactionRunner,
    build_runner,
)

__all__ = [
    "ReadOnlyTransactionRunner",
    "SessionRunner",
    "TransactionRunner",
    "build_runner",
    "create_engine",
    "create_sessionmaker",
    "init_schema",
]
