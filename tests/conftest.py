"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fakes import InMemoryVectorStore


@pytest.fixture
def memory_store() -> InMemoryVectorStore:
    """In-memory vector store with no collections."""
    return InMemoryVectorStore()


@pytest.fixture
def mock_collection() -> MagicMock:
    """Mock async collection with empty defaults."""
    collection = MagicMock()
    collection.create_search_index = AsyncMock(return_value="vector_index")

    index_cursor = MagicMock()
    index_cursor.to_list = AsyncMock(return_value=[])
    collection.list_search_indexes = AsyncMock(return_value=index_cursor)

    collection.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=[]))

    search_cursor = MagicMock()
    search_cursor.to_list = AsyncMock(return_value=[])
    collection.aggregate = AsyncMock(return_value=search_cursor)

    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mock_database(mock_collection: MagicMock) -> MagicMock:
    """Mock async database named 'wikipedia'."""
    database = MagicMock()
    database.name = "wikipedia"
    database.list_collection_names = AsyncMock(return_value=[])
    database.create_collection = AsyncMock()
    database.__getitem__.return_value = mock_collection
    return database


@pytest.fixture
def mock_client(mock_database: MagicMock) -> MagicMock:
    """Mock AsyncMongoClient whose default database is mock_database."""
    client = MagicMock()
    client.get_default_database.return_value = mock_database
    client.close = AsyncMock()
    return client
