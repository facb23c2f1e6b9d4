"""
Property endpoint tests.
Covers: create, read, update, delete, owner filter, owner reassignment,
file descriptors, and the activity log entries each mutation leaves behind.
"""
from __future__ import annotations

import uuid
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create_property(
    client: AsyncClient,
    headers: dict,
    owner_id: str,
    title: str = "City Flat",
    **kwargs: Any,
) -> dict:
    payload = {
        "owner_id": owner_id,
        "title": title,
        "description": "Two rooms near the station",
        "address": "9 Station Road",
        **kwargs,
    }
    response = await client.post("/api/v1/properties/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _history(client: AsyncClient, headers: dict, property_id: str) -> list[dict]:
    response = await client.get(
        f"/api/v1/activity/property/{property_id}", headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()["items"]


class TestCreateProperty:
    async def test_create_property_success(
        self, client: AsyncClient, admin_headers: dict, owner: dict
    ) -> None:
        data = await _create_property(
            client,
            admin_headers,
            owner["id"],
            files=[{"name": "deed.pdf", "url": "https://files.example/deed.pdf", "type": "application/pdf", "size": 2048}],
        )
        assert data["title"] == "City Flat"
        assert data["owner_id"] == owner["id"]
        assert data["owner"]["name"] == owner["name"]
        assert len(data["files"]) == 1
        assert data["files"][0]["name"] == "deed.pdf"
        assert data["files"][0]["id"]

    async def test_create_records_owner_by_name(
        self, client: AsyncClient, admin_headers: dict, owner: dict
    ) -> None:
        data = await _create_property(client, admin_headers, owner["id"])
        history = await _history(client, admin_headers, data["id"])
        assert len(history) == 1
        entry = history[0]
        assert entry["action"] == "CREATE"
        assert entry["entity_type"] == "PROPERTY"
        owner_change = next(c for c in entry["changes"] if c["field"] == "owner_id")
        assert owner_change["new_value"] == owner["name"]
        assert "files" not in {c["field"] for c in entry["changes"]}

    async def test_create_with_unknown_owner(
        self, client: AsyncClient, admin_headers: dict
    ) -> None:
        response = await client.post(
            "/api/v1/properties/",
            json={
                "owner_id": str(uuid.uuid4()),
                "title": "Orphan",
                "description": "No owner",
                "address": "Nowhere",
            },
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_create_missing_title(
        self, client: AsyncClient, admin_headers: dict, owner: dict
    ) -> None:
        response = await client.post(
            "/api/v1/properties/",
            json={"owner_id": owner["id"], "description": "x", "address": "y"},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestReadProperties:
    async def test_get_property(
        self, client: AsyncClient, admin_headers: dict, property_: dict
    ) -> None:
        response = await client.get(
            f"/api/v1/properties/{property_['id']}", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Seaside Villa"

    async def test_filter_by_owner(
        self, client: AsyncClient, admin_headers: dict, owner: dict, property_: dict
    ) -> None:
        other = await client.post(
            "/api/v1/owners/",
            json={"name": "Other", "address": "A", "phone": "1", "email": "o@example.com"},
            headers=admin_headers,
        )
        await _create_property(client, admin_headers, other.json()["id"], title="Elsewhere")

        response = await client.get(
            "/api/v1/properties/", params={"owner_id": owner["id"]}, headers=admin_headers
        )
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == property_["id"]

    async def test_search_properties(
        self, client: AsyncClient, admin_headers: dict, owner: dict, property_: dict
    ) -> None:
        await _create_property(client, admin_headers, owner["id"], title="Mountain Cabin")
        response = await client.get(
            "/api/v1/properties/", params={"search": "cabin"}, headers=admin_headers
        )
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["title"] == "Mountain Cabin"


class TestUpdateProperty:
    async def test_update_title(
        self, client: AsyncClient, admin_headers: dict, property_: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{property_['id']}",
            json={"title": "Seaside Villa II"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Seaside Villa II"

        update = next(
            e for e in await _history(client, admin_headers, property_["id"])
            if e["action"] == "UPDATE"
        )
        assert update["entity_name"] == "Seaside Villa II"
        assert update["changes"] == [
            {"field": "title", "old_value": "Seaside Villa", "new_value": "Seaside Villa II"}
        ]

    async def test_reassign_owner_logs_names(
        self, client: AsyncClient, admin_headers: dict, owner: dict, property_: dict
    ) -> None:
        new_owner = await client.post(
            "/api/v1/owners/",
            json={"name": "Jane Roe", "address": "A", "phone": "1", "email": "jr@example.com"},
            headers=admin_headers,
        )
        response = await client.put(
            f"/api/v1/properties/{property_['id']}",
            json={"owner_id": new_owner.json()["id"]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["owner_id"] == new_owner.json()["id"]

        update = next(
            e for e in await _history(client, admin_headers, property_["id"])
            if e["action"] == "UPDATE"
        )
        assert update["changes"] == [
            {"field": "owner_id", "old_value": owner["name"], "new_value": "Jane Roe"}
        ]

    async def test_reassign_to_unknown_owner(
        self, client: AsyncClient, admin_headers: dict, property_: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{property_['id']}",
            json={"owner_id": str(uuid.uuid4())},
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_file_changes_are_saved_but_not_logged(
        self, client: AsyncClient, admin_headers: dict, property_: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{property_['id']}",
            json={"files": [{"name": "plan.png", "url": "https://files.example/plan.png"}]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert [f["name"] for f in response.json()["files"]] == ["plan.png"]

        update = next(
            e for e in await _history(client, admin_headers, property_["id"])
            if e["action"] == "UPDATE"
        )
        assert update["changes"] is None


class TestDeleteProperty:
    async def test_delete_property(
        self, client: AsyncClient, admin_headers: dict, owner: dict, property_: dict
    ) -> None:
        response = await client.delete(
            f"/api/v1/properties/{property_['id']}", headers=admin_headers
        )
        assert response.status_code == 204

        fetched = await client.get(
            f"/api/v1/properties/{property_['id']}", headers=admin_headers
        )
        assert fetched.status_code == 404

        still_there = await client.get(f"/api/v1/owners/{owner['id']}", headers=admin_headers)
        assert still_there.status_code == 200

        delete = next(
            e for e in await _history(client, admin_headers, property_["id"])
            if e["action"] == "DELETE"
        )
        assert delete["entity_name"] == "Seaside Villa"
        assert delete["details"] is None
        assert {c["field"] for c in delete["changes"]} >= {"owner_id", "title"}

    async def test_delete_not_found(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.delete(
            f"/api/v1/properties/{uuid.uuid4()}", headers=admin_headers
        )
        assert response.status_code == 404
