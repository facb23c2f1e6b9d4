"""
ActivityLog Pydantic schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from assettrack.core.config import settings


class FieldChange(BaseModel):
    """One field-level difference recorded on a log entry."""

    field: str
    old_value: str | None = None
    new_value: str | None = None

    def as_record(self) -> dict[str, str]:
        """JSON shape stored on the entry; absent values are left out."""
        return self.model_dump(exclude_none=True)


class ActivityLogRead(BaseModel):
    id: uuid.UUID
    action: str
    entity_type: str
    entity_id: uuid.UUID
    entity_name: str
    admin_user: str
    timestamp: datetime
    changes: list[FieldChange] | None = None
    details: str | None = None

    model_config = {"from_attributes": True}


class ActivityLogFilter(BaseModel):
    """
    Read-side filters. Every provided filter must match (logical AND).
    Values outside the known action/entity type sets simply match nothing.
    """

    search: str | None = Field(default=None, max_length=200)
    action: str | None = None
    entity_type: str | None = None
    entity_id: uuid.UUID | None = None
    page: int = Field(default=1, ge=1)
    size: int = Field(
        default=settings.ACTIVITY_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE
    )


class ActivityStatistics(BaseModel):
    total: int
    today: int
    this_week: int
    creates: int
    updates: int
    deletes: int
