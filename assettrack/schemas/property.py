"""
Property Pydantic schemas.
Includes create/update/read variants, the file descriptor shape, and a
filter schema for the list endpoint.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from assettrack.schemas.owner import OwnerSummary


# ── Files ─────────────────────────────────────────────────────────────────────

class PropertyFile(BaseModel):
    """Descriptor of a file held in the external object store."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=2000)
    type: str = Field(default="application/octet-stream", max_length=255)
    size: int = Field(default=0, ge=0)
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ── Create ────────────────────────────────────────────────────────────────────

class PropertyCreate(BaseModel):
    owner_id: uuid.UUID
    title: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1, max_length=10000)
    address: str = Field(min_length=1, max_length=2000)
    map_link: str = Field(default="", max_length=4000)
    files: list[PropertyFile] = Field(default_factory=list, max_length=50)


# ── Update ────────────────────────────────────────────────────────────────────

class PropertyUpdate(BaseModel):
    owner_id: uuid.UUID | None = None
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1, max_length=10000)
    address: str | None = Field(default=None, min_length=1, max_length=2000)
    map_link: str | None = Field(default=None, max_length=4000)
    files: list[PropertyFile] | None = Field(default=None, max_length=50)


# ── Read ──────────────────────────────────────────────────────────────────────

class PropertyRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str
    address: str
    map_link: str
    files: list[PropertyFile]
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary | None = None

    model_config = {"from_attributes": True}


# ── Filter ────────────────────────────────────────────────────────────────────

class PropertyFilter(BaseModel):
    """Query parameters for the property list endpoint."""

    owner_id: uuid.UUID | None = None
    search: str | None = Field(default=None, max_length=200)
    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=100)
