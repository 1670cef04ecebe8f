"""
Shared pytest fixtures for telemetry backend tests.
"""
import os
from unittest.mock import patch

import pytest

from telemetry_backend.di.base_container import BaseContainer
from telemetry_backend.di.providers.events_provider import EventsProvider
from telemetry_backend.domain.repositories.event_repository import EventRepository
from telemetry_backend.infrastructure.cache.fallback_cache import LocalFallbackCache
from telemetry_backend.infrastructure.cache.local_storage import LocalKeyValueStore
from telemetry_backend.infrastructure.db.memory_event_repository import InMemoryEventRepository


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_telemetry_db",
        "EVENT_STORE_BACKEND": "memory",
        "EVENTS_API_URL": "http://events.test",
        "ANALYTICS_POLL_INTERVAL_SEC": "10",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def memory_repository():
    return InMemoryEventRepository()


@pytest.fixture
def container(memory_repository):
    """Container with the in-memory store and the real event use cases."""
    c = BaseContainer()
    c.register_singleton(EventRepository, memory_repository)
    EventsProvider.register(c)
    return c


@pytest.fixture
def local_store(tmp_path):
    return LocalKeyValueStore(tmp_path / "local")


@pytest.fixture
def fallback_cache(local_store):
    return LocalFallbackCache(local_store)
