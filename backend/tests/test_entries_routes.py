"""
DocCRUD Backend - Entries Route Tests
======================================

What:  HTTP-level tests for the schema-less /entries endpoints.
How:   HTTPX AsyncClient against the app, backed by a real SQLite store.
"""

import pytest


class TestEntries:

    @pytest.mark.asyncio
    async def test_store_single_entry(self, test_client):
        response = await test_client.post("/entries", json={"kind": "note", "text": "hi"})

        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "note"
        assert body["_id"] == f"entries/{body['_key']}"

        stored = await test_client.get(f"/entries/{body['_key']}")
        assert stored.status_code == 200
        assert stored.json() == body

    @pytest.mark.asyncio
    async def test_store_array_of_entries(self, test_client):
        payload = [{"n": 1}, {"n": 2}, {"n": 3}]

        response = await test_client.post("/entries", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert isinstance(body, list)
        assert [entry["n"] for entry in body] == [1, 2, 3]
        assert len({entry["_key"] for entry in body}) == 3

        keys = (await test_client.get("/entries")).json()
        assert keys == [entry["_key"] for entry in body]

    @pytest.mark.asyncio
    async def test_keys_only(self, test_client):
        await test_client.post("/entries", json={"_key": "first", "secret": "x"})
        await test_client.post("/entries", json={"_key": "second"})

        response = await test_client.get("/entries")

        assert response.status_code == 200
        assert response.json() == ["first", "second"]

    @pytest.mark.asyncio
    async def test_missing_entry_message(self, test_client):
        response = await test_client.get("/entries/nothing-here")

        assert response.status_code == 404
        assert response.json()["message"] == "The entry does not exist"

    @pytest.mark.asyncio
    async def test_duplicate_key_is_untranslated_store_error(self, test_client):
        await test_client.post("/entries", json={"_key": "dup"})

        response = await test_client.post("/entries", json={"_key": "dup"})

        assert response.status_code == 500
        assert response.json()["error"] == "store_error"
        assert response.json()["details"]["code"] == 1210

    @pytest.mark.asyncio
    async def test_scalar_body_returns_400(self, test_client):
        response = await test_client.post("/entries", json="just a string")
        assert response.status_code == 400
