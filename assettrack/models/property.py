"""
Property ORM model.
A tracked asset belonging to exactly one Owner. Attached files live in an
external object store; only their descriptors are kept here, in order.
"""
from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assettrack.db.base import Base, TimestampMixin


class Property(TimestampMixin, Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    map_link: Mapped[str] = mapped_column(Text, nullable=False, default="")
    files: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    owner: Mapped["Owner"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Owner",
        back_populates="properties",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_properties_title", "title"),
    )

    def __repr__(self) -> str:
        return f"<Property id={self.id} title={self.title!r} owner_id={self.owner_id}>"
