"""Provision a vector search index with automatic embedding.

Usage:
    python -m scripts.create_index --uri mongodb://localhost:27020/wikipedia
"""

import asyncio

from autoembed.cli import build_parser, create_store, load_settings
from autoembed.config import VectorIndexSettings
from autoembed.logging_config import get_logger, setup_logging
from autoembed.vectorstore.models import (
    AutoEmbedField,
    FilterField,
    VectorIndexDefinition,
)
from autoembed.vectorstore.service import VectorStore

logger = get_logger(__name__)


def build_index_definition(settings: VectorIndexSettings) -> VectorIndexDefinition:
    """Build the index definition described by the settings."""
    return VectorIndexDefinition(
        name=settings.name,
        embedding=AutoEmbedField(
            path=settings.embedding_path,
            model=settings.model,
            modality=settings.modality,
        ),
        filters=[FilterField(path=path) for path in settings.filter_paths],
    )


async def provision_index(
    store: VectorStore,
    definition: VectorIndexDefinition,
    collection: str,
) -> str:
    """Ensure the collection exists and submit the search index.

    The index builds and backfills embeddings after this returns.

    Args:
        store: Target vector store.
        definition: Index to create.
        collection: Collection to index.

    Returns:
        Name of the created index.

    Raises:
        VectorStoreError: If the collection or the index cannot be created.
    """
    created = await store.ensure_collection(collection)
    logger.debug(f"Collection {collection} {'created' if created else 'already present'}")

    name = await store.create_search_index(collection, definition)

    print(f"Vector search index '{name}' created on {store.database_name}.{collection}")
    print(
        f"Index will generate embeddings for the '{definition.embedding.path}' "
        f"field using {definition.embedding.model} model"
    )
    return name


async def run(uri: str | None = None, database: str | None = None) -> str:
    """Provision the configured index against the configured database."""
    settings = load_settings()
    setup_logging()

    store = create_store(settings.mongodb, uri=uri, database=database)
    try:
        return await provision_index(
            store,
            build_index_definition(settings.index),
            settings.mongodb.collection,
        )
    finally:
        await store.close()


def main() -> None:
    """Main entry point."""
    parser = build_parser("Create a vector search index with auto-embedding")
    args = parser.parse_args()
    asyncio.run(run(uri=args.uri, database=args.database))


if __name__ == "__main__":
    main()
