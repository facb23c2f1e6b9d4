"""
Owner ORM model.
A person or organisation holding one or more properties.
"""
from __future__ import annotations

import uuid

from sqlalchemy import Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assettrack.db.base import Base, TimestampMixin


class Owner(TimestampMixin, Base):
    __tablename__ = "owners"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # ── Relationships ─────────────────────────────────────────────────────────
    properties: Mapped[list["Property"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Property",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_owners_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Owner id={self.id} name={self.name!r}>"
