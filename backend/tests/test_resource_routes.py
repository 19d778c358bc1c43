"""
DocCRUD Backend - Resource Route Tests (/people, /todo)
========================================================

What:  HTTP-level tests of the five-verb resource routers.
How:   HTTPX AsyncClient against the app, backed by a real SQLite store.

What we test:
    ✅ Create → 201 with Location, then list/detail agree
    ✅ Invalid bodies → 400 with no write
    ✅ Duplicate key → 409, missing key → 404
    ✅ Replace and patch bump the revision
    ✅ Delete → 204, then 404
    ✅ Untranslated store errors → 500 with the store's code
    ✅ A write racing another writer → 409
    ✅ Unknown paths and methods use the common error body
"""

import pytest

from doccrud.store import DocumentCollection


class TestPeopleCreate:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_location(self, test_client, sample_person):
        response = await test_client.post("/people", json=sample_person)

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Alice"
        assert body["age"] == 30
        assert body["city"] == "Berlin"
        assert body["_id"] == f"people/{body['_key']}"
        assert body["_rev"]
        assert response.headers["Location"] == f"http://test/people/{body['_key']}"

    @pytest.mark.asyncio
    async def test_created_person_is_listed_and_readable(self, test_client, sample_person):
        created = (await test_client.post("/people", json=sample_person)).json()

        listing = await test_client.get("/people")
        detail = await test_client.get(f"/people/{created['_key']}")

        assert listing.status_code == 200
        assert listing.json() == [created]
        assert detail.status_code == 200
        assert detail.json() == created

    @pytest.mark.asyncio
    async def test_create_with_explicit_key(self, test_client):
        response = await test_client.post("/people", json={"_key": "bob", "name": "Bob", "age": 4})

        assert response.status_code == 201
        assert response.json()["_key"] == "bob"
        assert response.headers["Location"] == "http://test/people/bob"

    @pytest.mark.asyncio
    async def test_duplicate_key_returns_409(self, test_client):
        person = {"_key": "bob", "name": "Bob", "age": 4}
        await test_client.post("/people", json=person)

        response = await test_client.post("/people", json={**person, "name": "Other"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert (await test_client.get("/people/bob")).json()["name"] == "Bob"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Nameless age"},
            {"age": 20},
            {"name": "Ann", "age": "old"},
            {"name": "Ann", "age": True},
            {"name": "Ann", "age": "30"},
            [{"name": "Ann", "age": 1}],
        ],
    )
    async def test_invalid_body_returns_400_and_writes_nothing(self, test_client, payload):
        response = await test_client.post("/people", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["errors"]
        assert (await test_client.get("/people")).json() == []


class TestPeopleDetail:

    @pytest.mark.asyncio
    async def test_missing_person_returns_404(self, test_client):
        response = await test_client.get("/people/nobody")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "document not found"

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/people")
        assert response.status_code == 200
        assert response.json() == []


class TestPeopleReplace:

    @pytest.mark.asyncio
    async def test_replace_returns_new_revision(self, test_client, sample_person):
        created = (await test_client.post("/people", json=sample_person)).json()

        response = await test_client.put(
            f"/people/{created['_key']}", json={"name": "Alicia", "age": 31}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["_rev"] != created["_rev"]
        assert body["_oldRev"] == created["_rev"]
        stored = (await test_client.get(f"/people/{created['_key']}")).json()
        assert stored["name"] == "Alicia"
        assert "city" not in stored

    @pytest.mark.asyncio
    async def test_replace_missing_returns_404(self, test_client):
        response = await test_client.put("/people/nobody", json={"name": "X", "age": 1})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_replace_invalid_body_returns_400(self, test_client, sample_person):
        created = (await test_client.post("/people", json=sample_person)).json()

        response = await test_client.put(f"/people/{created['_key']}", json={"name": "X"})

        assert response.status_code == 400
        stored = (await test_client.get(f"/people/{created['_key']}")).json()
        assert stored["_rev"] == created["_rev"]


class TestPeopleUpdate:

    @pytest.mark.asyncio
    async def test_patch_merges_and_returns_document(self, test_client, sample_person):
        created = (await test_client.post("/people", json=sample_person)).json()

        response = await test_client.patch(f"/people/{created['_key']}", json={"age": 31})

        assert response.status_code == 200
        body = response.json()
        assert body["age"] == 31
        assert body["name"] == "Alice"
        assert body["city"] == "Berlin"
        assert body["_rev"] != created["_rev"]

    @pytest.mark.asyncio
    async def test_patch_missing_returns_404(self, test_client):
        response = await test_client.patch("/people/nobody", json={"age": 1})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_with_array_body_returns_400(self, test_client):
        response = await test_client.patch("/people/nobody", json=[1, 2])
        assert response.status_code == 400


class TestPeopleDelete:

    @pytest.mark.asyncio
    async def test_delete_returns_204_then_404(self, test_client, sample_person):
        created = (await test_client.post("/people", json=sample_person)).json()

        response = await test_client.delete(f"/people/{created['_key']}")

        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get(f"/people/{created['_key']}")).status_code == 404
        assert (await test_client.delete(f"/people/{created['_key']}")).status_code == 404


class TestTodo:

    @pytest.mark.asyncio
    async def test_todo_accepts_any_object(self, test_client):
        response = await test_client.post("/todo", json={"title": "Write tests", "done": False})

        assert response.status_code == 201
        assert response.headers["Location"] == f"http://test/todo/{response.json()['_key']}"
        assert response.json()["_id"].startswith("todo/")

    @pytest.mark.asyncio
    async def test_todo_rejects_non_object(self, test_client):
        response = await test_client.post("/todo", json=["not", "an", "object"])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_todo_and_people_are_separate(self, test_client, sample_person):
        await test_client.post("/people", json=sample_person)

        assert (await test_client.get("/todo")).json() == []


class TestStoreErrorsAndHeaders:

    @pytest.mark.asyncio
    async def test_missing_collection_returns_500_with_store_code(
        self, test_client, bootstrapped_store
    ):
        await bootstrapped_store.drop_collection("people")

        response = await test_client.get("/people")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "store_error"
        assert body["details"] == {"code": 1203, "kind": "COLLECTION_NOT_FOUND"}

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/people", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/people")
        assert len(response.headers["X-Request-ID"]) == 8


class TestLocationEncoding:

    @pytest.mark.asyncio
    async def test_location_escapes_reserved_key_characters(self, test_client):
        response = await test_client.post(
            "/people", json={"_key": "a%20b", "name": "Percent", "age": 1}
        )

        assert response.status_code == 201
        location = response.headers["Location"]
        assert location == "http://test/people/a%2520b"

        followed = await test_client.get(location)
        assert followed.status_code == 200
        assert followed.json()["_key"] == "a%20b"


class TestConcurrentWrites:
    """A write landing between the read and the compare-and-set loses with 409."""

    @pytest.fixture
    def interleaved_write(self, monkeypatch):
        """
        Make the first revision check see a stale row: another writer replaces
        the document right after it was read.
        """
        original = DocumentCollection._write_body
        raced = []

        async def write_after_competitor(self, session, record, body):
            if not raced:
                raced.append(record.key)
                await self.replace(record.key, {"name": "Competitor", "age": 99})
            return await original(self, session, record, body)

        monkeypatch.setattr(DocumentCollection, "_write_body", write_after_competitor)
        return raced

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, payload",
        [("patch", {"age": 31}), ("put", {"name": "Alicia", "age": 31})],
    )
    async def test_stale_write_returns_409(
        self, test_client, sample_person, interleaved_write, method, payload
    ):
        created = (await test_client.post("/people", json=sample_person)).json()

        response = await getattr(test_client, method)(
            f"/people/{created['_key']}", json=payload
        )

        assert interleaved_write == [created["_key"]]
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert response.json()["message"] == "conflict, _rev values do not match"
        stored = (await test_client.get(f"/people/{created['_key']}")).json()
        assert stored["name"] == "Competitor"
        assert stored["age"] == 99


class TestRoutingErrors:

    @pytest.mark.asyncio
    async def test_unknown_path_uses_error_shape(self, test_client):
        response = await test_client.get("/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Not Found"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_wrong_method_uses_error_shape(self, test_client):
        response = await test_client.delete("/people")

        assert response.status_code == 405
        assert response.json()["error"] == "method_not_allowed"
        assert "GET" in response.headers["Allow"]
