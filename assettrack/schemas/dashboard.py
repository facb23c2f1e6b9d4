"""
Dashboard summary schema.
"""
from __future__ import annotations

from pydantic import BaseModel

from assettrack.schemas.activity_log import ActivityLogRead
from assettrack.schemas.owner import OwnerRead


class DashboardSummary(BaseModel):
    total_owners: int
    total_properties: int
    activity_today: int
    recent_activity: list[ActivityLogRead]
    recent_owners: list[OwnerRead]
