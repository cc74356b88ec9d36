from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class EntrypointRecord(Base):
    __tablename__ = "entrypoints"

    name: Mapped[str] = mapped_column(Text, primary_key=True)

    doc_uris: Mapped[list[EntrypointDocUriRecord]] = relationship(
        back_populates="entrypoint", cascade="all, delete-orphan"
    )


class EntrypointDocUriRecord(Base):
    __tablename__ = "entrypoint_docuris"

    # Surrogate key: (entrypoint_name, docuri) is not unique at the schema level.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entrypoint_name: Mapped[str] = mapped_column(ForeignKey("entrypoints.name"), index=True)
    docuri: Mapped[str] = mapped_column(Text)

    entrypoint: Mapped[EntrypointRecord] = relationship(back_populates="doc_uris")
