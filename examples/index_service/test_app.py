"""Tests for the index service example — ordering, permissions, parameters."""

import json

import pytest

from turnstile.testing import TestClient

EDITOR = {"Authorization": "Bearer editor-token"}


class TestIndexes:
    @pytest.mark.asyncio
    async def test_empty(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert json.loads(response.text) == []

    @pytest.mark.asyncio
    async def test_load_requires_permission(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/pages", body=b"http://a/ 2020 200\n")
            assert response.status == 403
            assert response.text == "Permission 'index_edit' is required for this action.\n"

    @pytest.mark.asyncio
    async def test_load_then_query(self, example_app) -> None:
        async with TestClient(example_app) as client:
            loaded = await client.post(
                "/pages",
                headers=EDITOR,
                body=b"http://a/ 20200101 200\nhttp://b/ 20200102 404\nhttp://a/ 20210101 200\n",
            )
            assert json.loads(loaded.text) == {"index": "pages", "added": 3, "by": "editor"}

            response = await client.get("/pages?url=http://a/&limit=1")
            assert json.loads(response.text) == [
                {"url": "http://a/", "timestamp": "20200101", "status": 200}
            ]

    @pytest.mark.asyncio
    async def test_malformed_line_is_400(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/pages", headers=EDITOR, body=b"garbage\n")
            assert response.status == 400
            assert "malformed" in response.text

    @pytest.mark.asyncio
    async def test_query_requires_url(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/pages")
            assert response.status == 400
            assert response.text == "missing mandatory parameter: url"


class TestRules:
    @pytest.mark.asyncio
    async def test_specific_route_first(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/rules/new")
            assert json.loads(response.text) == {"prefix": ""}

    @pytest.mark.asyncio
    async def test_create_get_delete(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/rules?prefix=http://secret/", headers=EDITOR)
            assert created.status == 201
            rule_id = json.loads(created.text)["id"]

            fetched = await client.get(f"/rules/{rule_id}")
            assert json.loads(fetched.text) == {"id": rule_id, "prefix": "http://secret/"}

            denied = await client.delete(f"/rules/{rule_id}")
            assert denied.status == 403

            deleted = await client.delete(f"/rules/{rule_id}", headers=EDITOR)
            assert deleted.status == 204
            assert (await client.get(f"/rules/{rule_id}")).status == 404

    @pytest.mark.asyncio
    async def test_non_numeric_rule_id_not_found(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/rules/abc")
            assert response.status == 404
