"""
Field-level diffing for activity log entries.

Everything here is pure: inputs are never mutated and the only outside
access is the read-only display-name lookup callers pass in.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any, Literal

from assettrack.models.activity_log import ENTITY_OWNER
from assettrack.schemas.activity_log import FieldChange

# (entity_type, entity_id) -> display name, or None when the entity is gone.
DisplayNameLookup = Callable[[str, Any], "str | None"]

EXCLUDED_FIELDS: tuple[str, ...] = ("files",)

# Fields holding a reference to another entity, keyed to that entity's type.
FOREIGN_KEYS: dict[str, str] = {"owner_id": ENTITY_OWNER}

# Fields recorded in CREATE/DELETE snapshots, in display order.
OWNER_FIELDS: tuple[str, ...] = ("name", "address", "phone", "email")
PROPERTY_FIELDS: tuple[str, ...] = ("owner_id", "title", "description", "address", "map_link")


def stringify(value: Any) -> str | None:
    """Render a field value the way it is stored on a log entry."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _render(
    field: str,
    value: Any,
    lookup: DisplayNameLookup | None,
    references: Mapping[str, str],
) -> str | None:
    entity_type = references.get(field)
    if entity_type is None or value is None or lookup is None:
        return stringify(value)
    name = lookup(entity_type, value)
    return name if name else stringify(value)


def compute_changes(
    old_state: Mapping[str, Any],
    patch: Mapping[str, Any],
    *,
    lookup: DisplayNameLookup | None = None,
    excluded: Iterable[str] = EXCLUDED_FIELDS,
    references: Mapping[str, str] = FOREIGN_KEYS,
) -> list[FieldChange]:
    """
    Diff a proposed partial update against the prior state of an entity.

    Walks ``patch`` in key order and emits one FieldChange per field whose new
    value differs (by ``==``) from the old one. Excluded fields are skipped.
    Reference fields are rendered through ``lookup`` and fall back to the raw
    identifier when the referenced entity cannot be resolved.

    Returns an empty list when nothing differs.
    """
    skip = set(excluded)
    changes: list[FieldChange] = []
    for field, new_value in patch.items():
        if field in skip:
            continue
        old_value = old_state.get(field)
        if new_value == old_value:
            continue
        changes.append(
            FieldChange(
                field=field,
                old_value=_render(field, old_value, lookup, references),
                new_value=_render(field, new_value, lookup, references),
            )
        )
    return changes


def snapshot_changes(
    state: Mapping[str, Any],
    fields: Iterable[str],
    *,
    side: Literal["old", "new"],
    lookup: DisplayNameLookup | None = None,
    references: Mapping[str, str] = FOREIGN_KEYS,
) -> list[FieldChange]:
    """
    Record the populated fields of a record being created (``side="new"``)
    or deleted (``side="old"``). Empty and missing values are skipped.
    """
    changes: list[FieldChange] = []
    for field in fields:
        value = state.get(field)
        if value is None or value == "":
            continue
        rendered = _render(field, value, lookup, references)
        if side == "new":
            changes.append(FieldChange(field=field, new_value=rendered))
        else:
            changes.append(FieldChange(field=field, old_value=rendered))
    return changes


def changes_or_none(changes: list[FieldChange]) -> list[FieldChange] | None:
    """An empty diff is logged as an absent one."""
    return changes or None


def mapping_lookup(names: Mapping[str, Mapping[Any, str]]) -> DisplayNameLookup:
    """Build a lookup over prefetched ``{entity_type: {entity_id: name}}``."""

    def lookup(entity_type: str, entity_id: Any) -> str | None:
        return names.get(entity_type, {}).get(entity_id)

    return lookup
