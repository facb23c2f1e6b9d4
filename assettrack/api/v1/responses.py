"""
Response helpers shared by the owner, property and dashboard routes.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from assettrack.models.owner import Owner
from assettrack.schemas.owner import OwnerRead
from assettrack.services.activity_service import MutationOutcome
from assettrack.services.owner_service import owner_service

LOG_WARNING_HEADER = "X-Activity-Log-Warning"


def apply_log_warning(response: Response, outcome: MutationOutcome[Any]) -> None:
    """Flag a saved mutation whose activity log entry could not be written."""
    if outcome.log_warning:
        response.headers[LOG_WARNING_HEADER] = outcome.log_warning


async def owner_reads(db: AsyncSession, owners: Sequence[Owner]) -> list[OwnerRead]:
    """Serialise owners with their property counts, in one grouped query."""
    counts = await owner_service.property_counts(db, owners=owners)
    return [
        OwnerRead.model_validate(owner).model_copy(
            update={"property_count": counts.get(owner.id, 0)}
        )
        for owner in owners
    ]


async def owner_read(db: AsyncSession, owner: Owner) -> OwnerRead:
    return (await owner_reads(db, [owner]))[0]
