"""
Owner Pydantic schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


# ── Create ────────────────────────────────────────────────────────────────────

class OwnerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=2000)
    phone: str = Field(min_length=1, max_length=50)
    email: EmailStr


# ── Update ────────────────────────────────────────────────────────────────────

class OwnerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, min_length=1, max_length=2000)
    phone: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None


# ── Read ──────────────────────────────────────────────────────────────────────

class OwnerRead(BaseModel):
    id: uuid.UUID
    name: str
    address: str
    phone: str
    email: str
    created_at: datetime
    updated_at: datetime
    property_count: int = 0

    model_config = {"from_attributes": True}


class OwnerSummary(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


# ── Filter ────────────────────────────────────────────────────────────────────

class OwnerFilter(BaseModel):
    """Query parameters for the owner list endpoint."""

    search: str | None = Field(default=None, max_length=200)
    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=100)
