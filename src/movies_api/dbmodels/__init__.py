"""
Database models for the Movies API (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from sqlalchemy import (
    Double,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Movies(Base):
    __tablename__ = "movies"
    __table_args__ = (PrimaryKeyConstraint("id", name="movies_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    release_year: Mapped[int | None] = mapped_column(Integer)
    duration: Mapped[int | None] = mapped_column(Integer)
    rating: Mapped[float | None] = mapped_column(Double)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    dislike_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))

    def __repr__(self) -> str:
        return f"Movies(id={self.id!r}, title={self.title!r})"


target_metadata = Base.metadata

__all__ = ["Base", "Movies", "target_metadata"]
