"""Tests for account rules in ``UserService`` and ``AccountStore``."""

import asyncio

import pytest

from admin_dashboard_api.app.core.db import MemoryBackend
from admin_dashboard_api.app.services.user_service import UserService
from admin_dashboard_api.app.stores.accounts import AccountExists, AccountStore

pytestmark = pytest.mark.anyio


@pytest.fixture()
def service():
    return UserService(AccountStore(MemoryBackend([])))


# ---- unique email ------------------------------------------------------------


async def test_store_rejects_duplicate_email_on_create():
    store = AccountStore(MemoryBackend([]))
    await store.create({"email": "a@example.com", "name": "A"})
    with pytest.raises(AccountExists) as excinfo:
        await store.create({"email": "a@example.com", "name": "B"})
    assert excinfo.value.field == "email"
    assert len(await store.load_all()) == 1


async def test_store_allows_keeping_own_email_on_update():
    store = AccountStore(MemoryBackend([]))
    account = await store.create({"email": "a@example.com", "name": "A"})
    updated = await store.update(account["id"], {"email": "a@example.com", "name": "Ann"})
    assert updated["name"] == "Ann"


async def test_concurrent_registrations_with_same_email(service):
    results = await asyncio.gather(
        service.create_user("Ann", "dup@example.com", "secret1"),
        service.create_user("Bob", "dup@example.com", "secret2"),
        return_exceptions=True,
    )
    created = [r for r in results if isinstance(r, dict)]
    rejected = [r for r in results if isinstance(r, AccountExists)]
    assert len(created) == 1
    assert len(rejected) == 1
    assert [a["email"] for a in await service.accounts.load_all()] == ["dup@example.com"]


async def test_concurrent_renames_to_same_email(service):
    ann = await service.create_user("Ann", "ann@example.com", "secret1")
    bob = await service.create_user("Bob", "bob@example.com", "secret2")
    results = await asyncio.gather(
        service.update_user(ann["id"], {"email": "taken@example.com"}),
        service.update_user(bob["id"], {"email": "taken@example.com"}),
        return_exceptions=True,
    )
    assert sum(isinstance(r, AccountExists) for r in results) == 1
    emails = sorted(a["email"] for a in await service.accounts.load_all())
    assert emails.count("taken@example.com") == 1
    assert len(emails) == 2


async def test_rename_to_email_of_other_account(service):
    await service.create_user("Ann", "ann@example.com", "secret1")
    bob = await service.create_user("Bob", "bob@example.com", "secret2")
    with pytest.raises(AccountExists):
        await service.update_user(bob["id"], {"email": "ann@example.com"})
    assert (await service.accounts.get_by_id(bob["id"]))["email"] == "bob@example.com"


# ---- passwords ---------------------------------------------------------------


async def test_created_account_stores_hash_and_authenticates(service):
    account = await service.create_user("Ann", "ann@example.com", "secret1")
    assert account["username"] == "ann"
    assert account["password"] != "secret1"
    assert (await service.authenticate("ann@example.com", "secret1"))["id"] == account["id"]
    assert await service.authenticate("ann@example.com", "wrong") is None
    assert await service.authenticate("nobody@example.com", "secret1") is None


async def test_change_password(service):
    account = await service.create_user("Ann", "ann@example.com", "secret1")
    await service.change_password(account["id"], "secret9")
    stored = await service.accounts.get_by_id(account["id"])
    assert await service.check_password(stored, "secret9")
    assert not await service.check_password(stored, "secret1")
    assert not await service.check_password(stored, None)
