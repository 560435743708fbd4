"""Vector store data models."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pymongo.operations import SearchIndexModel

# Server-side ceiling on $vectorSearch numCandidates
MAX_NUM_CANDIDATES = 10000


class AutoEmbedField(BaseModel):
    """A field the server embeds automatically on write.

    Attributes:
        path: Document field holding the source text.
        model: Embedding model identifier.
        modality: Content modality of the source field.
    """

    type: Literal["autoEmbed"] = "autoEmbed"
    modality: str = Field(default="text", description="Content modality")
    path: str = Field(min_length=1, description="Source field path")
    model: str = Field(min_length=1, description="Embedding model identifier")


class FilterField(BaseModel):
    """A field indexed for filtering alongside vector similarity."""

    type: Literal["filter"] = "filter"
    path: str = Field(min_length=1, description="Filter field path")


class VectorIndexDefinition(BaseModel):
    """A named vector search index with one auto-embedded field.

    Attributes:
        name: Index name, unique per collection.
        type: Search index kind.
        embedding: The auto-embedded field.
        filters: Additional filter fields.
    """

    name: str = Field(min_length=1, description="Index name")
    type: Literal["vectorSearch"] = "vectorSearch"
    embedding: AutoEmbedField = Field(description="Auto-embedded field")
    filters: list[FilterField] = Field(
        default_factory=list,
        description="Filter fields",
    )

    @model_validator(mode="after")
    def _embedding_not_filtered(self) -> "VectorIndexDefinition":
        if any(f.path == self.embedding.path for f in self.filters):
            raise ValueError(
                f"path '{self.embedding.path}' cannot be both embedded and a filter"
            )
        return self

    def field_specs(self) -> list[dict[str, Any]]:
        """Return the index field list, embedding field first."""
        return [self.embedding.model_dump()] + [f.model_dump() for f in self.filters]

    def to_search_index_model(self) -> SearchIndexModel:
        """Build the driver model submitted to createSearchIndexes."""
        return SearchIndexModel(
            definition={"fields": self.field_specs()},
            name=self.name,
            type=self.type,
        )

    @classmethod
    def from_index_document(cls, document: dict[str, Any]) -> "VectorIndexDefinition":
        """Parse an index document returned by $listSearchIndexes.

        Args:
            document: Raw index description from the server.

        Returns:
            The index definition as the server reports it.

        Raises:
            ValueError: If the definition has no autoEmbed field.
        """
        definition = document.get("latestDefinition") or document.get("definition") or {}
        embedding: AutoEmbedField | None = None
        filters: list[FilterField] = []

        for field in definition.get("fields", []):
            kind = field.get("type")
            if kind == "autoEmbed" and embedding is None:
                embedding = AutoEmbedField.model_validate(field)
            elif kind == "filter":
                filters.append(FilterField.model_validate(field))

        if embedding is None:
            raise ValueError(f"Index {document.get('name')!r} has no autoEmbed field")

        return cls(
            name=document["name"],
            type=document.get("type", "vectorSearch"),
            embedding=embedding,
            filters=filters,
        )


class SearchIndexStatus(BaseModel):
    """Build state of a search index as reported by the server.

    Attributes:
        name: Index name.
        status: Server status such as PENDING, BUILDING, READY or FAILED.
        queryable: Whether the index currently serves queries.
        definition: Latest submitted definition.
    """

    name: str = Field(description="Index name")
    status: str = Field(default="PENDING", description="Server build status")
    queryable: bool = Field(default=False, description="Index serves queries")
    definition: dict[str, Any] = Field(
        default_factory=dict,
        description="Latest index definition",
    )

    @property
    def is_ready(self) -> bool:
        """True once the index is built and queryable."""
        return self.queryable and self.status == "READY"

    @property
    def is_failed(self) -> bool:
        """True if the server gave up building the index."""
        return self.status == "FAILED"

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "SearchIndexStatus":
        """Parse an index document returned by $listSearchIndexes."""
        return cls(
            name=document["name"],
            status=document.get("status", "PENDING"),
            queryable=bool(document.get("queryable", False)),
            definition=document.get("latestDefinition") or document.get("definition") or {},
        )


class VectorQuery(BaseModel):
    """A semantic query against an auto-embedded field.

    Attributes:
        text: Natural-language query, embedded by the server.
        index: Search index name.
        path: Embedded field to search.
        limit: Maximum results to return.
        num_candidates: Nearest neighbours considered before ranking.
        projection: Document fields to project into each result.
    """

    text: str = Field(description="Query text")
    index: str = Field(min_length=1, description="Search index name")
    path: str = Field(min_length=1, description="Embedded field path")
    limit: int = Field(default=10, gt=0, description="Maximum results")
    num_candidates: int = Field(
        default=100,
        gt=0,
        le=MAX_NUM_CANDIDATES,
        description="Candidate pool size",
    )
    projection: list[str] = Field(
        default_factory=lambda: ["title", "content"],
        description="Projected document fields",
    )

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query text must not be blank")
        return value

    @model_validator(mode="after")
    def _candidates_cover_limit(self) -> "VectorQuery":
        if self.num_candidates < self.limit:
            raise ValueError(
                f"num_candidates ({self.num_candidates}) must be >= limit ({self.limit})"
            )
        return self

    def to_pipeline(self) -> list[dict[str, Any]]:
        """Build the $vectorSearch aggregation pipeline."""
        stage: dict[str, Any] = {"_id": 0}
        stage.update({field: 1 for field in self.projection})
        stage["score"] = {"$meta": "vectorSearchScore"}

        return [
            {
                "$vectorSearch": {
                    "index": self.index,
                    "path": self.path,
                    "query": {"text": self.text},
                    "numCandidates": self.num_candidates,
                    "limit": self.limit,
                }
            },
            {"$project": stage},
        ]


class SearchResult(BaseModel):
    """Result from a vector similarity search.

    Attributes:
        title: Article title.
        content: Article content.
        score: Similarity score (higher is more similar).
        extra: Any other projected fields.
    """

    title: str = Field(default="", description="Article title")
    content: str = Field(default="", description="Article content")
    score: float = Field(description="Similarity score")
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Other projected fields",
    )

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "SearchResult":
        """Build a result from a projected aggregation document."""
        data = dict(document)
        return cls(
            title=data.pop("title", ""),
            content=data.pop("content", ""),
            score=data.pop("score", 0.0),
            extra=data,
        )
