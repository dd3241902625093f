"""
Pytest configuration and fixtures for the permission service tests.

mongomock stands in for a live MongoDB so the store runs its real queries.
"""

from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from permission_service.main import create_app
from permission_service.services.health import ServingStatus
from permission_service.services.permission_store import MongoStore


@pytest.fixture
def mongo_db():
    client = mongomock.MongoClient()
    yield client["permission"]
    client.close()


@pytest.fixture
def store(mongo_db) -> MongoStore:
    return MongoStore.open(mongo_db)


@pytest.fixture
def mock_collection() -> MagicMock:
    """A collection double for injecting driver failures."""
    collection = MagicMock()
    collection.full_name = "permission.permissions"
    return collection


@pytest.fixture
def mock_store(mock_collection) -> MongoStore:
    return MongoStore(mock_collection)


@pytest.fixture
def app(store):
    app = create_app(use_lifespan=False)
    app.state.store = store
    app.state.health_monitor = MagicMock(status=ServingStatus.SERVING)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
