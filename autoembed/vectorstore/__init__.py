"""Vector store module."""

from autoembed.vectorstore.models import (
    AutoEmbedField,
    FilterField,
    SearchIndexStatus,
    SearchResult,
    VectorIndexDefinition,
    VectorQuery,
)
from autoembed.vectorstore.service import MongoVectorStore, VectorStore

__all__ = [
    "AutoEmbedField",
    "FilterField",
    "MongoVectorStore",
    "SearchIndexStatus",
    "SearchResult",
    "VectorIndexDefinition",
    "VectorQuery",
    "VectorStore",
]
