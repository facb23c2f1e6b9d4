"""
Activity log store backed by the activity_logs table.

Append-only: there is deliberately no update or remove operation. Reads
order by timestamp (newest first) and break ties by insertion sequence.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.models.activity_log import ActivityLog
from assettrack.schemas.activity_log import ActivityLogFilter


class CRUDActivityLog:

    async def append(self, db: AsyncSession, *, values: dict[str, Any]) -> ActivityLog:
        entry = ActivityLog(**values)
        db.add(entry)
        await db.flush()
        return entry

    async def get(self, db: AsyncSession, log_id: uuid.UUID) -> ActivityLog | None:
        result = await db.execute(select(ActivityLog).where(ActivityLog.id == log_id))
        return result.scalar_one_or_none()

    async def count(self, db: AsyncSession, *, filters: ActivityLogFilter) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(ActivityLog)
            .where(*self._conditions(filters))
        )
        return result.scalar_one()

    async def list_entries(
        self,
        db: AsyncSession,
        *,
        filters: ActivityLogFilter,
        skip: int = 0,
        limit: int = 10,
    ) -> list[ActivityLog]:
        result = await db.execute(
            select(ActivityLog)
            .where(*self._conditions(filters))
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.sequence.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_action(self, db: AsyncSession) -> dict[str, int]:
        """Return a dict mapping action → count over the whole log."""
        result = await db.execute(
            select(ActivityLog.action, func.count(ActivityLog.sequence))
            .group_by(ActivityLog.action)
        )
        return {row[0]: row[1] for row in result.all()}

    async def count_between(
        self,
        db: AsyncSession,
        *,
        start: datetime,
        end: datetime | None = None,
    ) -> int:
        """Count entries with start <= timestamp (< end, when given)."""
        query = (
            select(func.count())
            .select_from(ActivityLog)
            .where(ActivityLog.timestamp >= start)
        )
        if end is not None:
            query = query.where(ActivityLog.timestamp < end)
        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    def _conditions(filters: ActivityLogFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if filters.search:
            conditions.append(
                or_(
                    ActivityLog.entity_name.icontains(filters.search, autoescape=True),
                    ActivityLog.admin_user.icontains(filters.search, autoescape=True),
                )
            )
        if filters.action:
            conditions.append(ActivityLog.action == filters.action)
        if filters.entity_type:
            conditions.append(ActivityLog.entity_type == filters.entity_type)
        if filters.entity_id is not None:
            conditions.append(ActivityLog.entity_id == filters.entity_id)
        return conditions


crud_activity_log = CRUDActivityLog()
