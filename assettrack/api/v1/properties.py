"""
Property routes.
Full CRUD + filtering by owner + search + pagination.
"""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from assettrack.api.v1.responses import apply_log_warning
from assettrack.core.dependencies import AdminActor, DBSession
from assettrack.schemas.pagination import PaginatedResponse
from assettrack.schemas.property import (
    PropertyCreate,
    PropertyFilter,
    PropertyRead,
    PropertyUpdate,
)
from assettrack.services.property_service import property_service

router = APIRouter(prefix="/properties", tags=["Properties"])


def _property_filter_params(
    owner_id: uuid.UUID | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
) -> PropertyFilter:
    return PropertyFilter(owner_id=owner_id, search=search, page=page, size=size)


@router.get(
    "/",
    response_model=PaginatedResponse[PropertyRead],
    summary="List properties with filters and pagination",
)
async def list_properties(
    _admin: AdminActor,
    db: DBSession,
    filters: Annotated[PropertyFilter, Depends(_property_filter_params)],
) -> PaginatedResponse[PropertyRead]:
    properties, total = await property_service.list_properties(db, filters=filters)
    return PaginatedResponse(
        items=[PropertyRead.model_validate(p) for p in properties],
        total=total,
        page=filters.page,
        size=filters.size,
    )


@router.post(
    "/",
    response_model=PropertyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    property_in: PropertyCreate,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> PropertyRead:
    outcome = await property_service.create_property(
        db, property_in=property_in, actor=admin
    )
    apply_log_warning(response, outcome)
    return PropertyRead.model_validate(outcome.entity)


@router.get(
    "/{property_id}",
    response_model=PropertyRead,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    _admin: AdminActor,
    db: DBSession,
) -> PropertyRead:
    prop = await property_service.get_property(db, property_id=property_id)
    return PropertyRead.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyRead,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    property_in: PropertyUpdate,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> PropertyRead:
    outcome = await property_service.update_property(
        db, property_id=property_id, property_in=property_in, actor=admin
    )
    apply_log_warning(response, outcome)
    return PropertyRead.model_validate(outcome.entity)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a property",
)
async def delete_property(
    property_id: uuid.UUID,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> None:
    outcome = await property_service.delete_property(
        db, property_id=property_id, actor=admin
    )
    apply_log_warning(response, outcome)
