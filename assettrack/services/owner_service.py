"""
Owner business logic service.
Runs each mutation as entity write, then diff, then activity log append.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.core.exceptions import NotFoundException
from assettrack.core.security import Actor
from assettrack.crud.owner import crud_owner
from assettrack.crud.property import crud_property
from assettrack.models.activity_log import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    ENTITY_OWNER,
    ENTITY_PROPERTY,
)
from assettrack.models.owner import Owner
from assettrack.schemas.owner import OwnerCreate, OwnerFilter, OwnerUpdate
from assettrack.services.activity_service import MutationOutcome, activity_service
from assettrack.services.diff import (
    OWNER_FIELDS,
    PROPERTY_FIELDS,
    changes_or_none,
    compute_changes,
    mapping_lookup,
    snapshot_changes,
)

logger = logging.getLogger(__name__)


def _state(obj: Any, fields: tuple[str, ...]) -> dict[str, Any]:
    return {field: getattr(obj, field) for field in fields}


class OwnerService:

    async def create_owner(
        self,
        db: AsyncSession,
        *,
        owner_in: OwnerCreate,
        actor: Actor,
    ) -> MutationOutcome[Owner]:
        owner = await crud_owner.create(db, obj_in=owner_in)
        logger.info("Owner %s created by %s", owner.id, actor.username)

        changes = snapshot_changes(_state(owner, OWNER_FIELDS), OWNER_FIELDS, side="new")
        return await activity_service.record_outcome(
            db,
            owner,
            action=ACTION_CREATE,
            entity_type=ENTITY_OWNER,
            entity_id=owner.id,
            entity_name=owner.name,
            admin_user=actor.username,
            changes=changes_or_none(changes),
        )

    async def get_owner(self, db: AsyncSession, *, owner_id: uuid.UUID) -> Owner:
        owner = await crud_owner.get(db, owner_id)
        if owner is None:
            raise NotFoundException("Owner", str(owner_id))
        return owner

    async def list_owners(
        self, db: AsyncSession, *, filters: OwnerFilter
    ) -> tuple[list[Owner], int]:
        return await crud_owner.list_with_filters(db, filters=filters)

    async def list_recent_owners(self, db: AsyncSession, *, limit: int) -> list[Owner]:
        return await crud_owner.list_recent(db, limit=limit)

    async def property_counts(
        self, db: AsyncSession, *, owners: Sequence[Owner]
    ) -> dict[uuid.UUID, int]:
        return await crud_property.count_by_owner(db, [owner.id for owner in owners])

    async def update_owner(
        self,
        db: AsyncSession,
        *,
        owner_id: uuid.UUID,
        owner_in: OwnerUpdate,
        actor: Actor,
    ) -> MutationOutcome[Owner]:
        """
        Apply a partial update. An update that changes nothing is still
        logged, with its changes left absent.
        """
        owner = await self.get_owner(db, owner_id=owner_id)

        patch = owner_in.model_dump(exclude_unset=True, exclude_none=True)
        changes = compute_changes(_state(owner, OWNER_FIELDS), patch)

        updated = await crud_owner.update(db, db_obj=owner, obj_in=patch)
        logger.info(
            "Owner %s updated by %s (%s)",
            owner_id,
            actor.username,
            ", ".join(change.field for change in changes) or "no changes",
        )

        return await activity_service.record_outcome(
            db,
            updated,
            action=ACTION_UPDATE,
            entity_type=ENTITY_OWNER,
            entity_id=updated.id,
            entity_name=updated.name,
            admin_user=actor.username,
            changes=changes_or_none(changes),
        )

    async def delete_owner(
        self,
        db: AsyncSession,
        *,
        owner_id: uuid.UUID,
        actor: Actor,
    ) -> MutationOutcome[Owner]:
        """
        Delete an owner together with its properties. Every removed record
        gets its own DELETE entry; properties are logged first.
        """
        owner = await self.get_owner(db, owner_id=owner_id)
        owner_state = _state(owner, OWNER_FIELDS)
        lookup = mapping_lookup({ENTITY_OWNER: {owner.id: owner.name}})

        warnings: list[str] = []
        properties = await crud_property.list_by_owner(db, owner_id=owner.id)
        for prop in properties:
            prop_state = _state(prop, PROPERTY_FIELDS)
            prop_id, prop_title = prop.id, prop.title
            await crud_property.remove(db, db_obj=prop)
            outcome = await activity_service.record_outcome(
                db,
                prop,
                action=ACTION_DELETE,
                entity_type=ENTITY_PROPERTY,
                entity_id=prop_id,
                entity_name=prop_title,
                admin_user=actor.username,
                changes=changes_or_none(
                    snapshot_changes(prop_state, PROPERTY_FIELDS, side="old", lookup=lookup)
                ),
                details=f"Removed together with owner {owner.name}",
            )
            if outcome.log_warning:
                warnings.append(outcome.log_warning)

        owner_name = owner.name
        await crud_owner.remove(db, db_obj=owner)
        logger.info(
            "Owner %s deleted by %s with %d properties",
            owner_id,
            actor.username,
            len(properties),
        )

        outcome = await activity_service.record_outcome(
            db,
            owner,
            action=ACTION_DELETE,
            entity_type=ENTITY_OWNER,
            entity_id=owner_id,
            entity_name=owner_name,
            admin_user=actor.username,
            changes=changes_or_none(
                snapshot_changes(owner_state, OWNER_FIELDS, side="old")
            ),
        )
        if outcome.log_warning:
            warnings.append(outcome.log_warning)
        outcome.log_warning = "; ".join(warnings) or None
        return outcome


owner_service = OwnerService()
