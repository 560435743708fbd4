"""Auto-embedding vector search provisioning and smoke testing."""

__version__ = "0.1.0"
