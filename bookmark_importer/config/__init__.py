"""Configuration for the Bookmark Importer."""

from .pydantic_config import (
    ConfigurationManager,
    ImporterConfig,
    LimitsConfig,
    NetworkConfig,
    PagingConfig,
    load_config,
)

__all__ = [
    "ConfigurationManager",
    "ImporterConfig",
    "LimitsConfig",
    "NetworkConfig",
    "PagingConfig",
    "load_config",
]
