"""
Owner routes.
Full CRUD + search + pagination. Every mutation is recorded in the activity log.
"""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from assettrack.api.v1.responses import apply_log_warning, owner_read, owner_reads
from assettrack.core.dependencies import AdminActor, DBSession
from assettrack.schemas.owner import OwnerCreate, OwnerFilter, OwnerRead, OwnerUpdate
from assettrack.schemas.pagination import PaginatedResponse
from assettrack.services.owner_service import owner_service

router = APIRouter(prefix="/owners", tags=["Owners"])


def _owner_filter_params(
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
) -> OwnerFilter:
    return OwnerFilter(search=search, page=page, size=size)


@router.get(
    "/",
    response_model=PaginatedResponse[OwnerRead],
    summary="List owners with search and pagination",
)
async def list_owners(
    _admin: AdminActor,
    db: DBSession,
    filters: Annotated[OwnerFilter, Depends(_owner_filter_params)],
) -> PaginatedResponse[OwnerRead]:
    owners, total = await owner_service.list_owners(db, filters=filters)
    return PaginatedResponse(
        items=await owner_reads(db, owners),
        total=total,
        page=filters.page,
        size=filters.size,
    )


@router.post(
    "/",
    response_model=OwnerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new owner",
)
async def create_owner(
    owner_in: OwnerCreate,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> OwnerRead:
    outcome = await owner_service.create_owner(db, owner_in=owner_in, actor=admin)
    apply_log_warning(response, outcome)
    return await owner_read(db, outcome.entity)


@router.get(
    "/{owner_id}",
    response_model=OwnerRead,
    summary="Get an owner by ID",
)
async def get_owner(
    owner_id: uuid.UUID,
    _admin: AdminActor,
    db: DBSession,
) -> OwnerRead:
    owner = await owner_service.get_owner(db, owner_id=owner_id)
    return await owner_read(db, owner)


@router.put(
    "/{owner_id}",
    response_model=OwnerRead,
    summary="Update an owner",
)
async def update_owner(
    owner_id: uuid.UUID,
    owner_in: OwnerUpdate,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> OwnerRead:
    outcome = await owner_service.update_owner(
        db, owner_id=owner_id, owner_in=owner_in, actor=admin
    )
    apply_log_warning(response, outcome)
    return await owner_read(db, outcome.entity)


@router.delete(
    "/{owner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an owner and all of their properties",
)
async def delete_owner(
    owner_id: uuid.UUID,
    admin: AdminActor,
    db: DBSession,
    response: Response,
) -> None:
    outcome = await owner_service.delete_owner(db, owner_id=owner_id, actor=admin)
    apply_log_warning(response, outcome)
