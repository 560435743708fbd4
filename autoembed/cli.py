"""Shared command-line plumbing for the operator scripts."""

import argparse

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from autoembed.config import MongoSettings, Settings, get_settings
from autoembed.exceptions import ConfigurationError
from autoembed.vectorstore.service import MongoVectorStore


def build_parser(description: str) -> argparse.ArgumentParser:
    """Create a parser accepting only connection options.

    Args:
        description: Script description shown in --help.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--uri",
        default=None,
        help="MongoDB connection string (overrides MONGODB_URI)",
    )
    parser.add_argument(
        "--database",
        default=None,
        help="Database name when the URI names none (overrides MONGODB_DATABASE)",
    )
    return parser


def create_store(
    settings: MongoSettings,
    uri: str | None = None,
    database: str | None = None,
) -> MongoVectorStore:
    """Build a store from settings with optional command-line overrides."""
    overrides: dict[str, object] = {}
    if uri:
        overrides["uri"] = SecretStr(uri)
    if database:
        overrides["database"] = database
    return MongoVectorStore(settings=settings.model_copy(update=overrides))


def load_settings() -> Settings:
    """Load settings, reporting invalid values as a ConfigurationError.

    Raises:
        ConfigurationError: If the environment or .env holds invalid values.
    """
    try:
        return get_settings()
    except PydanticValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigurationError(
            f"Invalid configuration: {'; '.join(problems)}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
