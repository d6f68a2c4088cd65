"""SQLAlchemy async database models for FleetQuote.

A configuration matrix is stored as one row: identity columns plus the full
variant tree in a JSON column, read and written whole.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ConfigurationMatrixModel(Base):
    """Option catalog for one base model family.

    base_model_family is indexed but deliberately not unique: concurrent
    imports of the same family can leave sibling rows.
    """

    __tablename__ = "configuration_matrices"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    base_model_family: Mapped[str] = mapped_column(Text, nullable=False)

    # Serialized list[ConfigurationVariant]
    variants: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_config_matrices_family", "base_model_family"),
    )
