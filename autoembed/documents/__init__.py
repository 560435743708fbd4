"""Document models and sample data."""

from autoembed.documents.models import SAMPLE_ARTICLES, Article

__all__ = [
    "SAMPLE_ARTICLES",
    "Article",
]
