"""
Activity logging service.
Appends immutable audit records after each entity mutation and serves the
filtered, paginated and aggregated views of the log.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.core.config import settings
from assettrack.core.exceptions import ActivityLogWriteError, NotFoundException
from assettrack.crud.activity_log import crud_activity_log
from assettrack.models.activity_log import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    ACTIONS,
    ENTITY_TYPES,
    ActivityLog,
)
from assettrack.schemas.activity_log import (
    ActivityLogFilter,
    ActivityStatistics,
    FieldChange,
)
from assettrack.schemas.pagination import clamp_page

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")

WEEK = timedelta(days=7)


class ActivityLogStore(Protocol):
    """Append-only persistence for log entries."""

    async def append(self, db: AsyncSession, *, values: dict[str, Any]) -> ActivityLog: ...

    async def get(self, db: AsyncSession, log_id: uuid.UUID) -> ActivityLog | None: ...

    async def count(self, db: AsyncSession, *, filters: ActivityLogFilter) -> int: ...

    async def list_entries(
        self,
        db: AsyncSession,
        *,
        filters: ActivityLogFilter,
        skip: int = 0,
        limit: int = 10,
    ) -> list[ActivityLog]: ...

    async def count_by_action(self, db: AsyncSession) -> dict[str, int]: ...

    async def count_between(
        self, db: AsyncSession, *, start: datetime, end: datetime | None = None
    ) -> int: ...


@dataclass
class ActivityLogPage:
    entries: list[ActivityLog]
    total_filtered: int
    page: int
    page_size: int


@dataclass
class MutationOutcome(Generic[EntityT]):
    """
    Result of an entity mutation. ``log_warning`` is set when the entity was
    saved but its activity log entry could not be written.
    """

    entity: EntityT
    log_entry: ActivityLog | None = None
    log_warning: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ActivityService:

    def __init__(
        self,
        store: ActivityLogStore = crud_activity_log,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.clock = clock

    # ── Writer ────────────────────────────────────────────────────────────────

    async def record_mutation(
        self,
        db: AsyncSession,
        *,
        action: str,
        entity_type: str,
        entity_id: uuid.UUID,
        entity_name: str,
        admin_user: str,
        changes: Sequence[FieldChange] | None = None,
        details: str | None = None,
    ) -> ActivityLog:
        """
        Append one entry for a mutation that has already been applied.

        The append runs in a SAVEPOINT so that a failure discards only the log
        write; it is reported as ActivityLogWriteError and the caller decides
        how to surface it.
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown activity action {action!r}")
        if entity_type not in ENTITY_TYPES:
            raise ValueError(f"Unknown entity type {entity_type!r}")
        if not admin_user:
            raise ValueError("admin_user is required to record a mutation")

        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "entity_name": entity_name,
            "admin_user": admin_user,
            "timestamp": _as_utc(self.clock()),
            "changes": [change.as_record() for change in changes] if changes else None,
            "details": details,
        }
        try:
            async with db.begin_nested():
                entry = await self.store.append(db, values=values)
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to write activity log: admin_user=%s action=%s entity_type=%s entity_id=%s: %s",
                admin_user,
                action,
                entity_type,
                entity_id,
                exc,
            )
            raise ActivityLogWriteError(action, entity_type, str(entity_id)) from exc

        logger.info(
            "Recorded %s %s %s by %s (%d changes)",
            action,
            entity_type,
            entity_id,
            admin_user,
            len(values["changes"] or ()),
        )
        return entry

    async def record_outcome(
        self,
        db: AsyncSession,
        entity: EntityT,
        *,
        action: str,
        entity_type: str,
        entity_id: uuid.UUID,
        entity_name: str,
        admin_user: str,
        changes: Sequence[FieldChange] | None = None,
        details: str | None = None,
    ) -> MutationOutcome[EntityT]:
        """Record a mutation, turning a log failure into a warning on the outcome."""
        try:
            entry = await self.record_mutation(
                db,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                entity_name=entity_name,
                admin_user=admin_user,
                changes=changes,
                details=details,
            )
        except ActivityLogWriteError as exc:
            return MutationOutcome(entity=entity, log_warning=str(exc))
        return MutationOutcome(entity=entity, log_entry=entry)

    # ── Reader ────────────────────────────────────────────────────────────────

    async def query_log(
        self,
        db: AsyncSession,
        *,
        filters: ActivityLogFilter,
    ) -> ActivityLogPage:
        """
        Return one page of entries matching every provided filter, newest
        first. The requested page is clamped to the pages that exist.
        """
        total = await self.store.count(db, filters=filters)
        page = clamp_page(filters.page, total, filters.size)
        entries = await self.store.list_entries(
            db,
            filters=filters,
            skip=(page - 1) * filters.size,
            limit=filters.size,
        )
        return ActivityLogPage(
            entries=entries,
            total_filtered=total,
            page=page,
            page_size=filters.size,
        )

    async def get_entry(self, db: AsyncSession, *, log_id: uuid.UUID) -> ActivityLog:
        entry = await self.store.get(db, log_id)
        if entry is None:
            raise NotFoundException("Activity log entry", str(log_id))
        return entry

    async def recent(self, db: AsyncSession, *, limit: int) -> list[ActivityLog]:
        return await self.store.list_entries(
            db, filters=ActivityLogFilter(), skip=0, limit=limit
        )

    async def compute_statistics(
        self,
        db: AsyncSession,
        *,
        now: datetime | None = None,
    ) -> ActivityStatistics:
        """
        Aggregate the whole log. ``today`` follows the calendar of the
        configured TIMEZONE; ``this_week`` is a rolling seven-day window.
        """
        now = _as_utc(now or self.clock())
        tz = settings.tzinfo

        by_action = await self.store.count_by_action(db)

        local_today = now.astimezone(tz).date()
        day_start = datetime.combine(local_today, time.min, tzinfo=tz)
        next_day_start = datetime.combine(
            local_today + timedelta(days=1), time.min, tzinfo=tz
        )
        today = await self.store.count_between(
            db,
            start=day_start.astimezone(timezone.utc),
            end=next_day_start.astimezone(timezone.utc),
        )
        this_week = await self.store.count_between(db, start=now - WEEK)

        return ActivityStatistics(
            total=sum(by_action.values()),
            today=today,
            this_week=this_week,
            creates=by_action.get(ACTION_CREATE, 0),
            updates=by_action.get(ACTION_UPDATE, 0),
            deletes=by_action.get(ACTION_DELETE, 0),
        )


activity_service = ActivityService()
