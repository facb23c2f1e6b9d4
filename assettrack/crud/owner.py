"""
Owner CRUD operations.
Extends CRUDBase with search, pagination, and display-name lookups.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.crud.base import CRUDBase
from assettrack.models.owner import Owner
from assettrack.schemas.owner import OwnerCreate, OwnerFilter, OwnerUpdate


class CRUDOwner(CRUDBase[Owner, OwnerCreate, OwnerUpdate]):

    async def list_with_filters(
        self,
        db: AsyncSession,
        *,
        filters: OwnerFilter,
    ) -> tuple[list[Owner], int]:
        """Return (owners, total), newest first."""
        query = select(Owner)
        count_query = select(func.count()).select_from(Owner)

        if filters.search:
            search_filter = or_(
                Owner.name.icontains(filters.search, autoescape=True),
                Owner.email.icontains(filters.search, autoescape=True),
                Owner.phone.icontains(filters.search, autoescape=True),
            )
            query = query.where(search_filter)
            count_query = count_query.where(search_filter)

        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        skip = (filters.page - 1) * filters.size
        result = await db.execute(
            query.order_by(Owner.created_at.desc(), Owner.name)
            .offset(skip)
            .limit(filters.size)
        )
        return list(result.scalars().all()), total

    async def get_names(
        self, db: AsyncSession, ids: Iterable[uuid.UUID | None]
    ) -> dict[uuid.UUID, str]:
        """Map each existing owner id to its name. Unknown ids are left out."""
        wanted = {owner_id for owner_id in ids if owner_id is not None}
        if not wanted:
            return {}
        result = await db.execute(
            select(Owner.id, Owner.name).where(Owner.id.in_(wanted))
        )
        return {row[0]: row[1] for row in result.all()}

    async def list_recent(self, db: AsyncSession, *, limit: int) -> list[Owner]:
        result = await db.execute(
            select(Owner).order_by(Owner.created_at.desc(), Owner.name).limit(limit)
        )
        return list(result.scalars().all())


crud_owner = CRUDOwner(Owner)
