"""
Cupcake Store — Cupcake SQLAlchemy Model
=========================================

What:  ORM model representing the `cupcakes` table.
How:   Inherits from the shared DeclarativeBase; `Database.create_schema()`
       and Alembic both read it from Base.metadata.
Who:   Built by the validation rules, persisted by CupcakeRepository,
       serialized by the CupcakeResponse schema.

Table Design:
    - Integer autoincrement primary key: the public identifier in
      /api/v1/cupcakes/{id}
    - price_cents: integer minor currency units, never floats
    - created_at / updated_at: UTC, timezone-aware. Both are assigned in
      Python so they are readable right after a flush without a refresh
      round-trip on the async session.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, text, true
from sqlalchemy.orm import Mapped, mapped_column

from cupcake_store.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Cupcake(Base):
    """
    A cupcake product.

    Lifecycle:
        1. Created from a validated create request (is_available = True)
        2. Mutated only by a validated partial update, written back as a
           full-row replace that refreshes updated_at
        3. Hard-deleted by identifier
    """

    __tablename__ = "cupcakes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    flavor: Mapped[str] = mapped_column(String(100), nullable=False)

    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return (
            f"<Cupcake(id={self.id}, name='{self.name}', "
            f"price_cents={self.price_cents}, is_available={self.is_available})>"
        )
