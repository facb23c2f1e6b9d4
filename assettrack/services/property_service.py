"""
Property business logic service.
Validates owner references and records every mutation in the activity log.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
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
from assettrack.models.property import Property
from assettrack.schemas.property import (
    PropertyCreate,
    PropertyFile,
    PropertyFilter,
    PropertyUpdate,
)
from assettrack.services.activity_service import MutationOutcome, activity_service
from assettrack.services.diff import (
    PROPERTY_FIELDS,
    DisplayNameLookup,
    changes_or_none,
    compute_changes,
    mapping_lookup,
    snapshot_changes,
)

logger = logging.getLogger(__name__)


def _files_json(files: Iterable[PropertyFile]) -> list[dict[str, Any]]:
    return [descriptor.model_dump(mode="json") for descriptor in files]


def _state(prop: Property) -> dict[str, Any]:
    state = {field: getattr(prop, field) for field in PROPERTY_FIELDS}
    state["files"] = prop.files
    return state


class PropertyService:

    async def create_property(
        self,
        db: AsyncSession,
        *,
        property_in: PropertyCreate,
        actor: Actor,
    ) -> MutationOutcome[Property]:
        owner = await crud_owner.get(db, property_in.owner_id)
        if owner is None:
            raise NotFoundException("Owner", str(property_in.owner_id))

        values = property_in.model_dump(exclude={"files"})
        values["files"] = _files_json(property_in.files)
        prop = await crud_property.create_from_dict(db, obj_in=values)
        await db.refresh(prop, attribute_names=["owner"])
        logger.info("Property %s created by %s", prop.id, actor.username)

        lookup = mapping_lookup({ENTITY_OWNER: {owner.id: owner.name}})
        changes = snapshot_changes(_state(prop), PROPERTY_FIELDS, side="new", lookup=lookup)
        return await activity_service.record_outcome(
            db,
            prop,
            action=ACTION_CREATE,
            entity_type=ENTITY_PROPERTY,
            entity_id=prop.id,
            entity_name=prop.title,
            admin_user=actor.username,
            changes=changes_or_none(changes),
        )

    async def get_property(self, db: AsyncSession, *, property_id: uuid.UUID) -> Property:
        prop = await crud_property.get(db, property_id)
        if prop is None:
            raise NotFoundException("Property", str(property_id))
        return prop

    async def list_properties(
        self, db: AsyncSession, *, filters: PropertyFilter
    ) -> tuple[list[Property], int]:
        return await crud_property.list_with_filters(db, filters=filters)

    async def update_property(
        self,
        db: AsyncSession,
        *,
        property_id: uuid.UUID,
        property_in: PropertyUpdate,
        actor: Actor,
    ) -> MutationOutcome[Property]:
        """
        Apply a partial update. Owner changes are logged by owner name;
        file list changes are saved but never diffed.
        """
        prop = await self.get_property(db, property_id=property_id)
        old_state = _state(prop)

        patch = property_in.model_dump(exclude_unset=True, exclude_none=True)
        if "files" in patch:
            patch["files"] = _files_json(property_in.files or [])

        new_owner_id = patch.get("owner_id")
        if new_owner_id is not None and new_owner_id != prop.owner_id:
            if await crud_owner.get(db, new_owner_id) is None:
                raise NotFoundException("Owner", str(new_owner_id))

        lookup = await self._owner_lookup(db, [prop.owner_id, new_owner_id])
        changes = compute_changes(old_state, patch, lookup=lookup)

        updated = await crud_property.update(db, db_obj=prop, obj_in=patch)
        await db.refresh(updated, attribute_names=["owner"])
        logger.info(
            "Property %s updated by %s (%s)",
            property_id,
            actor.username,
            ", ".join(change.field for change in changes) or "no changes",
        )

        return await activity_service.record_outcome(
            db,
            updated,
            action=ACTION_UPDATE,
            entity_type=ENTITY_PROPERTY,
            entity_id=updated.id,
            entity_name=updated.title,
            admin_user=actor.username,
            changes=changes_or_none(changes),
        )

    async def delete_property(
        self,
        db: AsyncSession,
        *,
        property_id: uuid.UUID,
        actor: Actor,
    ) -> MutationOutcome[Property]:
        prop = await self.get_property(db, property_id=property_id)
        state = _state(prop)
        lookup = await self._owner_lookup(db, [prop.owner_id])
        prop_title = prop.title

        await crud_property.remove(db, db_obj=prop)
        logger.info("Property %s deleted by %s", property_id, actor.username)

        changes = snapshot_changes(state, PROPERTY_FIELDS, side="old", lookup=lookup)
        return await activity_service.record_outcome(
            db,
            prop,
            action=ACTION_DELETE,
            entity_type=ENTITY_PROPERTY,
            entity_id=property_id,
            entity_name=prop_title,
            admin_user=actor.username,
            changes=changes_or_none(changes),
        )

    # ── Private helpers ───────────────────────────────────────────────────────

    async def _owner_lookup(
        self, db: AsyncSession, owner_ids: Iterable[uuid.UUID | None]
    ) -> DisplayNameLookup:
        names = await crud_owner.get_names(db, owner_ids)
        return mapping_lookup({ENTITY_OWNER: names})


property_service = PropertyService()
