"""
Diff engine tests.
Covers: change detection, no-op suppression, excluded fields, reference
rendering with fallback, creation/deletion snapshots.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from assettrack.models.activity_log import ENTITY_OWNER
from assettrack.schemas.activity_log import FieldChange
from assettrack.services.diff import (
    OWNER_FIELDS,
    changes_or_none,
    compute_changes,
    mapping_lookup,
    snapshot_changes,
    stringify,
)

OWNER_STATE = {
    "name": "John Doe",
    "address": "1 Main Street",
    "phone": "+1 555 0100",
    "email": "john@example.com",
}


class TestComputeChanges:
    def test_single_changed_field(self) -> None:
        changes = compute_changes(OWNER_STATE, {"name": "Jane Doe"})
        assert changes == [
            FieldChange(field="name", old_value="John Doe", new_value="Jane Doe")
        ]

    def test_unchanged_fields_are_suppressed(self) -> None:
        patch = {"name": "John Doe", "phone": "+1 555 0199", "email": "john@example.com"}
        changes = compute_changes(OWNER_STATE, patch)
        assert [c.field for c in changes] == ["phone"]

    def test_identical_patch_yields_nothing(self) -> None:
        assert compute_changes(OWNER_STATE, dict(OWNER_STATE)) == []
        assert changes_or_none(compute_changes(OWNER_STATE, dict(OWNER_STATE))) is None

    def test_follows_patch_order(self) -> None:
        patch = {"email": "a@example.com", "name": "A", "address": "B"}
        changes = compute_changes(OWNER_STATE, patch)
        assert [c.field for c in changes] == ["email", "name", "address"]

    def test_inputs_are_not_mutated(self) -> None:
        old = dict(OWNER_STATE)
        patch = {"name": "Jane Doe"}
        compute_changes(old, patch)
        assert old == OWNER_STATE
        assert patch == {"name": "Jane Doe"}

    def test_reversing_a_change_swaps_values(self) -> None:
        forward = compute_changes({"title": "Old"}, {"title": "New"})
        backward = compute_changes({"title": "New"}, {"title": "Old"})
        assert forward[0].old_value == backward[0].new_value == "Old"
        assert forward[0].new_value == backward[0].old_value == "New"

    def test_files_are_never_diffed(self) -> None:
        old = {"title": "Villa", "files": []}
        patch = {"files": [{"id": "f1", "name": "deed.pdf"}]}
        assert compute_changes(old, patch) == []

    def test_custom_exclusions(self) -> None:
        changes = compute_changes(OWNER_STATE, {"phone": "0"}, excluded=("phone",))
        assert changes == []

    def test_new_field_not_in_old_state(self) -> None:
        changes = compute_changes({}, {"map_link": "https://maps.example/1"})
        assert changes[0].old_value is None
        assert changes[0].new_value == "https://maps.example/1"

    def test_owner_reference_rendered_by_name(self) -> None:
        old_owner, new_owner = uuid.uuid4(), uuid.uuid4()
        lookup = mapping_lookup(
            {ENTITY_OWNER: {old_owner: "John Doe", new_owner: "Jane Roe"}}
        )
        changes = compute_changes(
            {"owner_id": old_owner}, {"owner_id": new_owner}, lookup=lookup
        )
        assert changes == [
            FieldChange(field="owner_id", old_value="John Doe", new_value="Jane Roe")
        ]

    def test_unresolved_reference_falls_back_to_id(self) -> None:
        old_owner, new_owner = uuid.uuid4(), uuid.uuid4()
        lookup = mapping_lookup({ENTITY_OWNER: {new_owner: "Jane Roe"}})
        changes = compute_changes(
            {"owner_id": old_owner}, {"owner_id": new_owner}, lookup=lookup
        )
        assert changes[0].old_value == str(old_owner)
        assert changes[0].new_value == "Jane Roe"


class TestSnapshotChanges:
    def test_creation_snapshot_has_only_new_values(self) -> None:
        changes = snapshot_changes(OWNER_STATE, OWNER_FIELDS, side="new")
        assert [c.field for c in changes] == list(OWNER_FIELDS)
        assert all(c.old_value is None for c in changes)
        assert changes[0].new_value == "John Doe"

    def test_deletion_snapshot_has_only_old_values(self) -> None:
        changes = snapshot_changes(OWNER_STATE, OWNER_FIELDS, side="old")
        assert all(c.new_value is None for c in changes)
        assert changes[-1].old_value == "john@example.com"

    def test_empty_fields_are_skipped(self) -> None:
        state = {"title": "Villa", "description": "", "map_link": None}
        changes = snapshot_changes(
            state, ("title", "description", "map_link"), side="new"
        )
        assert [c.field for c in changes] == ["title"]


class TestStringify:
    def test_none_stays_absent(self) -> None:
        assert stringify(None) is None

    def test_datetimes_use_iso_format(self) -> None:
        moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert stringify(moment) == "2026-01-02T03:04:05+00:00"
        assert stringify(date(2026, 1, 2)) == "2026-01-02"

    def test_other_values_use_str(self) -> None:
        assert stringify(42) == "42"
        assert stringify(True) == "True"


def test_field_change_record_omits_absent_values() -> None:
    assert FieldChange(field="name", new_value="A").as_record() == {
        "field": "name",
        "new_value": "A",
    }
