"""
ActivityLog ORM model.
Immutable audit trail of every Owner and Property mutation.

Rows are append-only: the mapper refuses to flush an UPDATE or DELETE of an
existing entry. ``sequence`` is the insertion counter that breaks ties
between entries sharing a timestamp.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    event,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from assettrack.core.exceptions import ImmutableActivityLogError
from assettrack.db.base import Base

ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_DELETE = "DELETE"
ACTIONS = (ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE)

ENTITY_OWNER = "OWNER"
ENTITY_PROPERTY = "PROPERTY"
ENTITY_TYPES = (ENTITY_OWNER, ENTITY_PROPERTY)


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    sequence: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        unique=True,
        nullable=False,
        default=uuid.uuid4,
    )
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # No foreign key: entries outlive the entities they describe.
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    entity_name: Mapped[str] = mapped_column(String(500), nullable=False)
    admin_user: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    changes: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql"),
        nullable=True,
    )
    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE')", name="valid_action"
        ),
        CheckConstraint(
            "entity_type IN ('OWNER', 'PROPERTY')", name="valid_entity_type"
        ),
        Index("ix_activity_logs_timestamp", "timestamp"),
        Index("ix_activity_logs_entity_type_id", "entity_type", "entity_id"),
        Index("ix_activity_logs_action", "action"),
    )

    def __repr__(self) -> str:
        return (
            f"<ActivityLog id={self.id} action={self.action!r} "
            f"entity_type={self.entity_type!r} entity_name={self.entity_name!r}>"
        )


@event.listens_for(ActivityLog, "before_update")
def _refuse_update(mapper: Any, connection: Any, target: ActivityLog) -> None:
    raise ImmutableActivityLogError(f"Activity log entry {target.id} cannot be modified")


@event.listens_for(ActivityLog, "before_delete")
def _refuse_delete(mapper: Any, connection: Any, target: ActivityLog) -> None:
    raise ImmutableActivityLogError(f"Activity log entry {target.id} cannot be deleted")
