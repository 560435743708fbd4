"""Vector store interface and MongoDB implementation."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import (
    BulkWriteError,
    CollectionInvalid,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
)

from autoembed.config import MongoSettings, get_settings
from autoembed.documents.models import Article
from autoembed.exceptions import (
    DocumentError,
    ErrorCode,
    SearchError,
    SearchIndexError,
    VectorStoreError,
)
from autoembed.logging_config import get_logger
from autoembed.vectorstore.models import (
    SearchIndexStatus,
    SearchResult,
    VectorIndexDefinition,
    VectorQuery,
)

logger = get_logger(__name__)


def _error_code(error: Exception, default: ErrorCode) -> ErrorCode:
    if isinstance(error, ConnectionFailure):
        return ErrorCode.CONNECTION_FAILED
    return default


def _server_details(error: Exception) -> dict[str, Any]:
    details: dict[str, Any] = {"error": str(error)}
    if isinstance(error, OperationFailure):
        details["server_code"] = error.code
        details["server_code_name"] = (error.details or {}).get("codeName")
    return details


class VectorStore(ABC):
    """Abstract base class for vector stores with server-side embedding.

    Defines the interface for provisioning indexes, writing documents
    and running semantic queries.
    """

    @property
    @abstractmethod
    def database_name(self) -> str:
        """Get the target database name."""
        ...

    @abstractmethod
    async def collection_exists(self, name: str) -> bool:
        """Check if a collection exists.

        Args:
            name: Collection name.

        Returns:
            True if collection exists.
        """
        ...

    @abstractmethod
    async def ensure_collection(self, name: str) -> bool:
        """Create a collection unless it already exists.

        Args:
            name: Collection name.

        Returns:
            True if the collection was created, False if it already existed.

        Raises:
            VectorStoreError: If creation fails.
        """
        ...

    @abstractmethod
    async def create_search_index(
        self,
        collection: str,
        definition: VectorIndexDefinition,
    ) -> str:
        """Submit a search index definition.

        Returns once the server accepts the definition; the build and the
        embedding backfill continue asynchronously.

        Args:
            collection: Collection name.
            definition: Index definition.

        Returns:
            Name of the created index.

        Raises:
            SearchIndexError: If the server rejects the definition.
        """
        ...

    @abstractmethod
    async def get_search_index(
        self,
        collection: str,
        name: str,
    ) -> SearchIndexStatus | None:
        """Look up a search index by name.

        Args:
            collection: Collection name.
            name: Index name.

        Returns:
            Index status, or None if no such index exists.

        Raises:
            SearchIndexError: If the lookup fails.
        """
        ...

    @abstractmethod
    async def insert_documents(
        self,
        collection: str,
        documents: Sequence[Article | Mapping[str, Any]],
    ) -> int:
        """Insert documents as one batch.

        Args:
            collection: Collection name.
            documents: Articles or raw mappings to insert.

        Returns:
            Number of documents inserted.

        Raises:
            DocumentError: If any document is invalid or the batch fails.
        """
        ...

    @abstractmethod
    async def count_documents(self, collection: str) -> int:
        """Count documents in a collection."""
        ...

    @abstractmethod
    async def vector_search(
        self,
        collection: str,
        query: VectorQuery,
    ) -> list[SearchResult]:
        """Run a semantic query.

        Args:
            collection: Collection name.
            query: Query parameters.

        Returns:
            Results ordered by descending score.

        Raises:
            SearchError: If the query fails.
        """
        ...

    async def close(self) -> None:
        """Release any connection held by the store."""
        return None

    async def wait_until_queryable(
        self,
        collection: str,
        name: str,
        timeout: float = 120.0,
        initial_interval: float = 1.0,
        max_interval: float = 8.0,
    ) -> SearchIndexStatus | None:
        """Poll index status with exponential backoff until it is queryable.

        Gives up quietly after ``timeout`` seconds and returns the last
        status seen, which may be None or not ready.

        Raises:
            SearchIndexError: If the server reports the build as FAILED.
            ValueError: If the timeout or intervals are out of range.
        """
        if timeout < 0 or initial_interval <= 0 or max_interval < initial_interval:
            raise ValueError(
                "poll requires timeout >= 0 and 0 < initial_interval <= max_interval"
            )

        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + timeout
        interval = initial_interval

        while True:
            status = await self.get_search_index(collection, name)

            if status is not None and status.is_failed:
                raise SearchIndexError(
                    f"Search index build failed: {name}",
                    code=ErrorCode.INDEX_BUILD_FAILED,
                    details={"collection": collection, "index": name},
                )
            if status is not None and status.is_ready:
                logger.info(f"Index {name} is queryable after {loop.time() - started:.1f}s")
                return status

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(
                    f"Index {name} not queryable after {timeout:.0f}s, continuing",
                    extra={"status": status.status if status else None},
                )
                return status

            delay = min(interval, remaining)
            logger.debug(f"Index {name} not ready, retrying in {delay:.1f}s")
            await asyncio.sleep(delay)
            interval = min(interval * 2, max_interval)


class MongoVectorStore(VectorStore):
    """MongoDB vector store using auto-embedding search indexes."""

    def __init__(
        self,
        settings: MongoSettings | None = None,
        client: AsyncMongoClient | None = None,
    ) -> None:
        """Initialize MongoDB vector store.

        Args:
            settings: MongoDB configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().mongodb
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> AsyncMongoClient:
        """Get or create the MongoDB client."""
        if self._client is None:
            self._client = AsyncMongoClient(
                self._settings.uri.get_secret_value(),
                appname=self._settings.app_name,
                serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
            )
        return self._client

    def _get_database(self) -> AsyncDatabase:
        return self._get_client().get_default_database(default=self._settings.database)

    @property
    def database_name(self) -> str:
        """Get the target database name."""
        return self._get_database().name

    async def close(self) -> None:
        """Close the MongoDB client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def collection_exists(self, name: str) -> bool:
        """Check if collection exists."""
        db = self._get_database()
        try:
            names = await db.list_collection_names(filter={"name": name})
            return name in names
        except PyMongoError as e:
            raise VectorStoreError(
                f"Failed to check collection: {e}",
                code=_error_code(e, ErrorCode.COLLECTION_ERROR),
                details={"collection": name, **_server_details(e)},
            ) from e

    async def ensure_collection(self, name: str) -> bool:
        """Create the collection if it is missing."""
        if await self.collection_exists(name):
            logger.debug(f"Collection already exists: {name}")
            return False

        db = self._get_database()
        try:
            await db.create_collection(name)
        except CollectionInvalid:
            # Created concurrently between the check and the create
            return False
        except PyMongoError as e:
            raise VectorStoreError(
                f"Failed to create collection: {e}",
                code=_error_code(e, ErrorCode.COLLECTION_ERROR),
                details={"collection": name, **_server_details(e)},
            ) from e

        logger.info(f"Created collection: {name}")
        return True

    async def create_search_index(
        self,
        collection: str,
        definition: VectorIndexDefinition,
    ) -> str:
        """Submit a vectorSearch index to the server."""
        coll = self._get_database()[collection]

        try:
            name = await coll.create_search_index(definition.to_search_index_model())
        except PyMongoError as e:
            logger.error(f"Search index creation failed: {e}")
            raise SearchIndexError(
                f"Failed to create search index {definition.name}: {e}",
                code=_error_code(e, ErrorCode.INDEX_CREATE_FAILED),
                details={
                    "collection": collection,
                    "index": definition.name,
                    **_server_details(e),
                },
            ) from e

        logger.info(
            f"Submitted search index: {name}",
            extra={"collection": collection, "model": definition.embedding.model},
        )
        return name

    async def get_search_index(
        self,
        collection: str,
        name: str,
    ) -> SearchIndexStatus | None:
        """Fetch a single index description via $listSearchIndexes."""
        coll = self._get_database()[collection]

        try:
            cursor = await coll.list_search_indexes(name)
            documents = await cursor.to_list()
        except PyMongoError as e:
            raise SearchIndexError(
                f"Failed to list search indexes: {e}",
                code=_error_code(e, ErrorCode.INDEX_ERROR),
                details={"collection": collection, "index": name, **_server_details(e)},
            ) from e

        if not documents:
            return None
        return SearchIndexStatus.from_document(documents[0])

    async def insert_documents(
        self,
        collection: str,
        documents: Sequence[Article | Mapping[str, Any]],
    ) -> int:
        """Insert documents with a single ordered insert_many."""
        if not documents:
            return 0

        # Validate the whole batch before anything reaches the server
        try:
            articles = [
                doc if isinstance(doc, Article) else Article.model_validate(doc)
                for doc in documents
            ]
        except PydanticValidationError as e:
            raise DocumentError(
                f"Invalid document in batch: {e.error_count()} error(s)",
                code=ErrorCode.DOCUMENT_INVALID,
                details={"collection": collection, "errors": e.errors()},
            ) from e

        coll = self._get_database()[collection]

        try:
            result = await coll.insert_many(
                [article.to_document() for article in articles],
                ordered=True,
            )
        except BulkWriteError as e:
            inserted = e.details.get("nInserted", 0)
            logger.error(
                f"Bulk insert failed after {inserted} of {len(articles)} documents",
                extra={"collection": collection},
            )
            raise DocumentError(
                f"Bulk insert failed: {e}",
                code=ErrorCode.BULK_WRITE_FAILED,
                details={
                    "collection": collection,
                    "submitted": len(articles),
                    "inserted": inserted,
                    "write_errors": e.details.get("writeErrors", []),
                },
            ) from e
        except PyMongoError as e:
            raise DocumentError(
                f"Failed to insert documents: {e}",
                code=_error_code(e, ErrorCode.BULK_WRITE_FAILED),
                details={"collection": collection, **_server_details(e)},
            ) from e

        inserted = len(result.inserted_ids)
        logger.debug(
            f"Inserted {inserted} documents",
            extra={"collection": collection},
        )
        return inserted

    async def count_documents(self, collection: str) -> int:
        """Count documents in a collection."""
        coll = self._get_database()[collection]
        try:
            return await coll.count_documents({})
        except PyMongoError as e:
            raise VectorStoreError(
                f"Failed to count documents: {e}",
                code=_error_code(e, ErrorCode.COLLECTION_ERROR),
                details={"collection": collection, **_server_details(e)},
            ) from e

    async def vector_search(
        self,
        collection: str,
        query: VectorQuery,
    ) -> list[SearchResult]:
        """Run $vectorSearch followed by a scoring projection."""
        coll = self._get_database()[collection]

        try:
            cursor = await coll.aggregate(query.to_pipeline())
            documents = await cursor.to_list()
        except PyMongoError as e:
            logger.error(f"Vector search failed: {e}")
            raise SearchError(
                f"Failed to search: {e}",
                code=_error_code(e, ErrorCode.SEARCH_ERROR),
                details={
                    "collection": collection,
                    "index": query.index,
                    **_server_details(e),
                },
            ) from e

        results = [SearchResult.from_document(doc) for doc in documents]

        if any(a.score < b.score for a, b in zip(results, results[1:])):
            logger.warning(
                "Search results are not ordered by descending score",
                extra={"collection": collection, "index": query.index},
            )

        logger.debug(
            f"Vector search returned {len(results)} results",
            extra={"limit": query.limit, "num_candidates": query.num_candidates},
        )
        return results
