"""
Dashboard summary route.
"""
from __future__ import annotations

from fastapi import APIRouter

from assettrack.api.v1.responses import owner_reads
from assettrack.core.config import settings
from assettrack.core.dependencies import AdminActor, DBSession
from assettrack.crud.owner import crud_owner
from assettrack.crud.property import crud_property
from assettrack.schemas.activity_log import ActivityLogRead
from assettrack.schemas.dashboard import DashboardSummary
from assettrack.services.activity_service import activity_service
from assettrack.services.owner_service import owner_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/",
    response_model=DashboardSummary,
    summary="Dashboard statistics",
)
async def get_dashboard(
    _admin: AdminActor,
    db: DBSession,
) -> DashboardSummary:
    statistics = await activity_service.compute_statistics(db)
    recent = await activity_service.recent(db, limit=settings.DASHBOARD_RECENT_LIMIT)
    newest_owners = await owner_service.list_recent_owners(
        db, limit=settings.DASHBOARD_RECENT_LIMIT
    )
    return DashboardSummary(
        total_owners=await crud_owner.get_count(db),
        total_properties=await crud_property.get_count(db),
        activity_today=statistics.today,
        recent_activity=[ActivityLogRead.model_validate(entry) for entry in recent],
        recent_owners=await owner_reads(db, newest_owners),
    )
