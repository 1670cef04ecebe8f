"""
Unit tests for MongoEventRepository with a mocked Motor collection.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from bson.errors import InvalidDocument
from pymongo import DESCENDING
from pymongo.errors import ServerSelectionTimeoutError

from telemetry_backend.domain.exceptions import PersistenceError, ValidationError
from telemetry_backend.infrastructure.db.mongo_event_repository import MongoEventRepository


def _collection_with_docs(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)

    collection = MagicMock()
    collection.find.return_value = cursor
    return collection, cursor


class TestAppend:
    @pytest.mark.asyncio
    async def test_inserts_document(self):
        inserted_id = ObjectId()
        collection = MagicMock()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))
        repo = MongoEventRepository(event_collection=collection)

        event = await repo.append(" button_click ", {"button": "quote"})

        doc = collection.insert_one.await_args.args[0]
        assert doc["name"] == "button_click"
        assert doc["params"] == {"button": "quote"}
        assert doc["createdAt"] == doc["updatedAt"]
        assert event.id == str(inserted_id)
        assert event.created_at == doc["createdAt"]

    @pytest.mark.asyncio
    async def test_missing_params_stored_as_empty(self):
        collection = MagicMock()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
        repo = MongoEventRepository(event_collection=collection)

        await repo.append("page_view")

        assert collection.insert_one.await_args.args[0]["params"] == {}

    @pytest.mark.asyncio
    async def test_blank_name_never_inserted(self):
        collection = MagicMock()
        collection.insert_one = AsyncMock()
        repo = MongoEventRepository(event_collection=collection)

        with pytest.raises(ValidationError):
            await repo.append("")
        collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_driver_error_becomes_persistence_error(self):
        collection = MagicMock()
        collection.insert_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        repo = MongoEventRepository(event_collection=collection)

        with pytest.raises(PersistenceError) as exc_info:
            await repo.append("page_view")
        assert exc_info.value.operation == "append"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            OverflowError("MongoDB can only handle up to 8-byte ints"),
            InvalidDocument("key 'a\\x00b' must not contain null character"),
        ],
    )
    async def test_unencodable_params_become_persistence_error(self, error):
        collection = MagicMock()
        collection.insert_one = AsyncMock(side_effect=error)
        repo = MongoEventRepository(event_collection=collection)

        with pytest.raises(PersistenceError) as exc_info:
            await repo.append("page_view", {"n": 2**70})
        assert exc_info.value.operation == "append"
        assert exc_info.value.__cause__ is error


class TestRecent:
    @pytest.mark.asyncio
    async def test_sorted_newest_first_with_limit(self):
        created = datetime(2025, 6, 1, 12, 0, 0)
        oid = ObjectId()
        collection, cursor = _collection_with_docs(
            [{"_id": oid, "name": "page_view", "params": {"path": "/a"}, "createdAt": created, "updatedAt": created}]
        )
        repo = MongoEventRepository(event_collection=collection)

        events = await repo.recent(100)

        cursor.sort.assert_called_once_with([("createdAt", DESCENDING), ("_id", DESCENDING)])
        cursor.limit.assert_called_once_with(100)
        assert len(events) == 1
        assert events[0].id == str(oid)
        assert events[0].created_at == created.replace(tzinfo=timezone.utc)
        assert events[0].params == {"path": "/a"}

    @pytest.mark.asyncio
    async def test_nameless_documents_skipped(self):
        created = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        collection, _ = _collection_with_docs(
            [
                {"_id": ObjectId(), "name": "", "createdAt": created},
                {"_id": ObjectId(), "name": "page_view", "createdAt": created},
            ]
        )
        repo = MongoEventRepository(event_collection=collection)

        events = await repo.recent()

        assert [e.name for e in events] == ["page_view"]
        assert events[0].params == {}

    @pytest.mark.asyncio
    async def test_driver_error_becomes_persistence_error(self):
        collection, cursor = _collection_with_docs([])
        cursor.to_list = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        repo = MongoEventRepository(event_collection=collection)

        with pytest.raises(PersistenceError):
            await repo.recent()


class TestEnsureIndexes:
    @pytest.mark.asyncio
    async def test_creates_created_at_index(self):
        collection = MagicMock()
        collection.create_index = AsyncMock()
        repo = MongoEventRepository(event_collection=collection)

        await repo.ensure_indexes()

        collection.create_index.assert_awaited_once_with([("createdAt", DESCENDING)])
