"""
Activity log routes.
"""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from assettrack.core.config import settings
from assettrack.core.dependencies import AdminActor, DBSession
from assettrack.schemas.activity_log import (
    ActivityLogFilter,
    ActivityLogRead,
    ActivityStatistics,
)
from assettrack.schemas.pagination import PaginatedResponse
from assettrack.services.activity_service import ActivityLogPage, activity_service

router = APIRouter(prefix="/activity", tags=["Activity Logs"])


def _activity_filter_params(
    search: str | None = Query(default=None, max_length=200),
    action: str | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=settings.ACTIVITY_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> ActivityLogFilter:
    return ActivityLogFilter(
        search=search or None,
        action=action or None,
        entity_type=entity_type or None,
        page=page,
        size=size,
    )


def _to_response(result: ActivityLogPage) -> PaginatedResponse[ActivityLogRead]:
    return PaginatedResponse(
        items=[ActivityLogRead.model_validate(entry) for entry in result.entries],
        total=result.total_filtered,
        page=result.page,
        size=result.page_size,
    )


@router.get(
    "/",
    response_model=PaginatedResponse[ActivityLogRead],
    summary="Browse the activity log",
)
async def list_activity(
    _admin: AdminActor,
    db: DBSession,
    filters: Annotated[ActivityLogFilter, Depends(_activity_filter_params)],
) -> PaginatedResponse[ActivityLogRead]:
    result = await activity_service.query_log(db, filters=filters)
    return _to_response(result)


@router.get(
    "/statistics",
    response_model=ActivityStatistics,
    summary="Activity log statistics",
)
async def activity_statistics(
    _admin: AdminActor,
    db: DBSession,
) -> ActivityStatistics:
    return await activity_service.compute_statistics(db)


@router.get(
    "/{log_id}",
    response_model=ActivityLogRead,
    summary="Get a single activity log entry",
)
async def get_activity_entry(
    log_id: uuid.UUID,
    _admin: AdminActor,
    db: DBSession,
) -> ActivityLogRead:
    entry = await activity_service.get_entry(db, log_id=log_id)
    return ActivityLogRead.model_validate(entry)


@router.get(
    "/{entity_type}/{entity_id}",
    response_model=PaginatedResponse[ActivityLogRead],
    summary="Get the history of a single owner or property",
)
async def entity_activity(
    entity_type: str,
    entity_id: uuid.UUID,
    _admin: AdminActor,
    db: DBSession,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=settings.ACTIVITY_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PaginatedResponse[ActivityLogRead]:
    filters = ActivityLogFilter(
        entity_type=entity_type.upper(),
        entity_id=entity_id,
        page=page,
        size=size,
    )
    result = await activity_service.query_log(db, filters=filters)
    return _to_response(result)
