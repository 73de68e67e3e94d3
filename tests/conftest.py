"""Shared test fixtures."""

import os
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from pymongo import MongoClient

from database import get_db
from main import app

MONGODB_TEST_URL = os.getenv("MONGODB_TEST_URL")


@pytest.fixture(name="mock_db")
def mock_db_fixture():
    """A mocked pymongo Database that remembers which collections were created.

    `mock_db.existing` lists collection names the fake server knows about and
    `mock_db.collections` maps names to their mocked Collection objects.
    """
    existing = []
    collections = {}

    def get_collection(name):
        if name not in collections:
            collection = MagicMock(name=f"collection:{name}")
            collection.name = name
            collection.create_indexes.side_effect = lambda models: [m.document["name"] for m in models]
            collection.create_index.side_effect = lambda keys, **kwargs: kwargs["name"]
            collections[name] = collection
        return collections[name]

    def create_collection(name, **kwargs):
        existing.append(name)
        return get_collection(name)

    db = MagicMock(name="database")
    db.name = "testdb"
    db.list_collection_names.side_effect = lambda: list(existing)
    db.create_collection.side_effect = create_collection
    db.__getitem__.side_effect = get_collection
    db.existing = existing
    db.collections = collections
    return db


@pytest.fixture(name="client")
def client_fixture(mock_db):
    """Create a test client wired to the mocked database."""
    app.dependency_overrides[get_db] = lambda: mock_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="live_db")
def live_db_fixture():
    """A throwaway database on a real MongoDB server (MONGODB_TEST_URL)."""
    if not MONGODB_TEST_URL:
        pytest.skip("MONGODB_TEST_URL not set")
    client = MongoClient(MONGODB_TEST_URL, serverSelectionTimeoutMS=2000)
    name = f"bootstrap_test_{uuid4().hex[:8]}"
    yield client[name]
    client.drop_database(name)
    client.close()
