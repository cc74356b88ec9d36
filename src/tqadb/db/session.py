from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker

from tqadb.db.models import Base


def create_engine(database_url: str, *, echo: bool = False) -> Engine:
    return sa_create_engine(database_url, echo=echo)


def create_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
