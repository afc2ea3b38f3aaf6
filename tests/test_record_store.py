"""Tests for the record stores and the JSON file backend."""

import asyncio
import json

import pytest

from admin_dashboard_api.app.core.db import JsonFileBackend, MemoryBackend, StoreUnavailable
from admin_dashboard_api.app.stores.accounts import AccountStore
from admin_dashboard_api.app.stores.base import RecordStore, next_id

pytestmark = pytest.mark.anyio


@pytest.fixture()
def store(tmp_path):
    return RecordStore(JsonFileBackend(tmp_path / "items.json"))


# ---- ids and timestamps ------------------------------------------------------


def test_next_id_uses_max_plus_one():
    assert next_id([]) == 1
    assert next_id([{"id": 3}, {"id": 7}, {"id": 5}]) == 8


async def test_create_assigns_sequential_ids(store):
    await store.ensure_initialized()
    created = [await store.create({"name": f"item {i}"}) for i in range(3)]
    assert [r["id"] for r in created] == [1, 2, 3]
    assert all(r["createdAt"] == r["updatedAt"] for r in created)
    assert all(r["createdAt"].endswith("Z") for r in created)


async def test_create_ignores_client_supplied_id(store):
    await store.ensure_initialized()
    record = await store.create({"id": 99, "name": "x"})
    assert record["id"] == 1


async def test_ids_not_reused_after_deleting_middle_record(store):
    await store.ensure_initialized()
    for i in range(3):
        await store.create({"name": str(i)})
    assert await store.delete(2) is True
    record = await store.create({"name": "new"})
    assert record["id"] == 4


async def test_concurrent_creates_get_unique_ids(store):
    await store.ensure_initialized()
    created = await asyncio.gather(*(store.create({"n": i}) for i in range(20)))
    ids = sorted(r["id"] for r in created)
    assert ids == list(range(1, 21))
    assert len(await store.load_all()) == 20


async def test_concurrent_updates_keep_every_change(store):
    await store.ensure_initialized()
    record = await store.create({"name": "lamp", "price": 5, "stock": 1})
    await asyncio.gather(
        store.update(record["id"], {"name": "desk lamp"}),
        store.update(record["id"], {"price": 7}),
        store.update(record["id"], {"stock": 3}),
    )
    stored = await store.get_by_id(record["id"])
    assert (stored["name"], stored["price"], stored["stock"]) == ("desk lamp", 7, 3)


# ---- lookups, update, delete -------------------------------------------------


async def test_get_by_field_returns_first_match(store):
    await store.ensure_initialized()
    await store.create({"email": "a@example.com", "name": "first"})
    await store.create({"email": "a@example.com", "name": "second"})
    found = await store.get_by_field("email", "a@example.com")
    assert found["name"] == "first"
    assert await store.get_by_field("email", "missing@example.com") is None


async def test_update_merges_and_refreshes_updated_at(store):
    await store.ensure_initialized()
    record = await store.create({"name": "old", "price": 5})
    record_before = dict(record)
    await asyncio.sleep(0.01)
    updated = await store.update(record["id"], {"name": "new", "id": 42})
    assert updated["id"] == record["id"]
    assert updated["name"] == "new"
    assert updated["price"] == 5
    assert updated["createdAt"] == record_before["createdAt"]
    assert updated["updatedAt"] > record_before["updatedAt"]


async def test_update_and_delete_unknown_id(store):
    await store.ensure_initialized()
    assert await store.update(12, {"name": "x"}) is None
    assert await store.delete(12) is False


async def test_get_by_id_on_empty_collection(store):
    await store.ensure_initialized()
    assert await store.get_by_id(1) is None
    assert await store.load_all() == []


# ---- persistence -------------------------------------------------------------


async def test_collection_is_json_array_on_disk(tmp_path):
    path = tmp_path / "items.json"
    store = RecordStore(JsonFileBackend(path))
    await store.ensure_initialized()
    await store.create({"name": "a"})
    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert data[0]["name"] == "a"
    assert not list(tmp_path.glob(".items.json.*.tmp"))


async def test_seeding_is_idempotent_and_never_overwrites(tmp_path):
    path = tmp_path / "users.json"
    store = AccountStore(JsonFileBackend(path))
    await store.ensure_initialized()
    seeded = await store.load_all()
    assert [a["email"] for a in seeded] == ["admin@example.com", "user1@example.com"]

    await store.delete(2)
    await AccountStore(JsonFileBackend(path)).ensure_initialized()
    assert [a["id"] for a in await store.load_all()] == [1]


async def test_corrupt_file_raises_store_unavailable(tmp_path):
    path = tmp_path / "items.json"
    path.write_text("{not json", encoding="utf-8")
    store = RecordStore(JsonFileBackend(path))
    await store.ensure_initialized()
    with pytest.raises(StoreUnavailable):
        await store.load_all()
    assert path.read_text(encoding="utf-8") == "{not json"


async def test_non_array_document_is_rejected(tmp_path):
    path = tmp_path / "items.json"
    path.write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(StoreUnavailable):
        await RecordStore(JsonFileBackend(path)).get_by_id(1)


async def test_memory_backend_copies_records():
    backend = MemoryBackend([])
    store = RecordStore(backend)
    record = await store.create({"tags": ["a"]})
    record["tags"].append("b")
    assert (await store.get_by_id(1))["tags"] == ["a"]


async def test_account_defaults_on_create():
    store = AccountStore(MemoryBackend([]))
    account = await store.create({"email": "x@example.com", "name": "X"})
    assert account["role"] == "user"
    assert account["status"] == "active"
    assert account["avatar"] is None
    assert account["lastLogin"] is None
    assert (await store.get_by_email("x@example.com"))["id"] == account["id"]
