"""
Property CRUD operations.
Extends CRUDBase with filtering, pagination, and per-owner queries.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.crud.base import CRUDBase
from assettrack.models.property import Property
from assettrack.schemas.property import PropertyCreate, PropertyFilter, PropertyUpdate


class CRUDProperty(CRUDBase[Property, PropertyCreate, PropertyUpdate]):

    async def list_with_filters(
        self,
        db: AsyncSession,
        *,
        filters: PropertyFilter,
    ) -> tuple[list[Property], int]:
        """Return (properties, total) applying all filter criteria."""
        query = select(Property)
        count_query = select(func.count()).select_from(Property)

        if filters.owner_id is not None:
            query = query.where(Property.owner_id == filters.owner_id)
            count_query = count_query.where(Property.owner_id == filters.owner_id)

        if filters.search:
            search_filter = or_(
                Property.title.icontains(filters.search, autoescape=True),
                Property.address.icontains(filters.search, autoescape=True),
            )
            query = query.where(search_filter)
            count_query = count_query.where(search_filter)

        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        skip = (filters.page - 1) * filters.size
        result = await db.execute(
            query.order_by(Property.created_at.desc(), Property.title)
            .offset(skip)
            .limit(filters.size)
        )
        return list(result.scalars().all()), total

    async def list_by_owner(
        self, db: AsyncSession, *, owner_id: uuid.UUID
    ) -> list[Property]:
        result = await db.execute(
            select(Property)
            .where(Property.owner_id == owner_id)
            .order_by(Property.created_at)
        )
        return list(result.scalars().all())

    async def count_by_owner(
        self, db: AsyncSession, owner_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, int]:
        """Map each requested owner id to its number of properties, zero included."""
        wanted = set(owner_ids)
        if not wanted:
            return {}
        result = await db.execute(
            select(Property.owner_id, func.count(Property.id))
            .where(Property.owner_id.in_(wanted))
            .group_by(Property.owner_id)
        )
        counts = dict.fromkeys(wanted, 0)
        counts.update({row[0]: row[1] for row in result.all()})
        return counts


crud_property = CRUDProperty(Property)
