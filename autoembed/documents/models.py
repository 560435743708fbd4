"""Document data models."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Article(BaseModel):
    """An article stored in the searchable collection.

    The server assigns ``_id`` on insert; clients never set one.

    Attributes:
        title: Short title, indexed as a filter field.
        content: Free text embedded by the server.
    """

    title: str = Field(description="Article title")
    content: str = Field(description="Article body text")

    @field_validator("title", "content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def to_document(self) -> dict[str, Any]:
        """Return the mapping inserted into the collection."""
        return {"title": self.title, "content": self.content}


SAMPLE_ARTICLES: tuple[Article, ...] = (
    Article(
        title="Machine Learning",
        content=(
            "Machine learning is a subset of artificial intelligence that enables "
            "systems to learn and improve from experience without being explicitly "
            "programmed. It focuses on developing algorithms that can access data "
            "and use it to learn for themselves."
        ),
    ),
    Article(
        title="Neural Networks",
        content=(
            "Artificial neural networks are computing systems inspired by biological "
            "neural networks. They consist of interconnected nodes that process "
            "information using connectionist approaches to computation."
        ),
    ),
    Article(
        title="Deep Learning",
        content=(
            "Deep learning is part of a broader family of machine learning methods "
            "based on artificial neural networks with representation learning. It "
            "can be supervised, semi-supervised or unsupervised."
        ),
    ),
)
