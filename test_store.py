import asyncio

import pytest

from db import Database
from store import MappingStore, StorageError


def run(database, coro_fn):
    async def runner():
        try:
            await database.create_all()
            return await coro_fn(MappingStore(database))
        finally:
            await database.dispose()
    return asyncio.run(runner())


def test_create_and_find(database):
    async def scenario(store):
        created = await store.create("https://example.com", 17)
        found = await store.find_by_code(17)
        return created, found

    created, found = run(database, scenario)
    assert created.id is not None
    assert created.short_code == 17
    assert found.original_url == "https://example.com"


def test_find_missing_returns_none(database):
    async def scenario(store):
        await store.create("https://example.com", 1)
        return await store.find_by_code(2)

    assert run(database, scenario) is None


def test_duplicate_codes_resolve_to_first(database):
    async def scenario(store):
        await store.create("https://a.example.com", 3)
        await store.create("https://b.example.com", 3)
        return await store.find_by_code(3)

    assert run(database, scenario).original_url == "https://a.example.com"


def test_unreachable_database_raises_storage_error(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'test.db'}")
    store = MappingStore(database)

    async def scenario():
        try:
            with pytest.raises(StorageError):
                await store.create("https://example.com", 1)
            with pytest.raises(StorageError):
                await store.find_by_code(1)
        finally:
            await database.dispose()

    asyncio.run(scenario())
