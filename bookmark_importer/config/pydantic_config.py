"""
Pydantic-based configuration system for the Bookmark Importer.

Settings are grouped by pipeline concern (network probing, paging, limits)
and can be loaded from a TOML or JSON file, falling back to defaults.
"""

import json
import os
import warnings
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..utils.error_handler import ConfigurationError

OFFLINE_ENV_VAR = "BOOKMARK_IMPORTER_OFFLINE_MODE"


class NetworkConfig(BaseModel):
    """Link validation settings."""

    timeout: float = Field(
        default=8.0,
        ge=0.5,
        le=120.0,
        description="Per-link probe timeout in seconds",
        json_schema_extra={
            "error_msg": "Timeout must be between 0.5 and 120 seconds. "
            "Recommended: 8 seconds."
        },
    )
    concurrency: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum concurrent link probes",
        json_schema_extra={
            "error_msg": "Concurrency must be between 1 and 50. "
            "Higher values may cause rate limiting."
        },
    )
    network_error_status: Literal["invalid", "suspicious"] = Field(
        default="invalid",
        description="Status assigned when a probe fails at the transport level",
        json_schema_extra={
            "error_msg": "Network error status must be 'invalid' or 'suspicious'."
        },
    )
    offline: bool = Field(
        default=False,
        description="Treat the host as having no network connectivity",
    )

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v):
        """Provide performance warnings for extreme values."""
        if v > 20:
            warnings.warn(
                f"High concurrency ({v}) may trigger rate limiting "
                f"from websites. Consider using 5-10.",
                UserWarning,
            )
        return v


class PagingConfig(BaseModel):
    """Page layout settings."""

    grid_columns: Optional[int] = Field(
        default=None,
        description="Launchpad grid columns (clamped when deriving page size)",
    )
    grid_rows: Optional[int] = Field(
        default=None,
        description="Launchpad grid rows (clamped when deriving page size)",
    )
    min_fill_target: int = Field(
        default=12,
        ge=1,
        le=200,
        description="Minimum items before SmartCompact flushes merged folders",
    )
    smart_compact: bool = Field(
        default=True,
        description="Merge small folders onto shared pages",
    )


class LimitsConfig(BaseModel):
    """Import size limits."""

    max_import_count: int = Field(
        default=500,
        ge=1,
        le=10000,
        description="Hard ceiling on bookmarks imported in one run",
    )
    extreme_count_threshold: int = Field(
        default=1000,
        ge=1,
        description="Bookmark count at which callers should warn the user",
    )


class ImporterConfig(BaseModel):
    """Main configuration model."""

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    paging: PagingConfig = Field(default_factory=PagingConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)

    store_path: Path = Field(
        default=Path("quicklinks_store.json"),
        description="Path of the JSON page store",
    )
    store_quota_bytes: int = Field(
        default=102400,
        ge=1024,
        description="Maximum serialized size of the page store in bytes",
    )


def format_config_error(error: Union[ValidationError, Exception]) -> str:
    """
    Build a readable message from a configuration validation failure.

    Args:
        error: Pydantic ValidationError or any other exception

    Returns:
        Multi-line error message
    """
    if not isinstance(error, ValidationError):
        return f"Configuration error: {error}"

    lines: List[str] = ["Configuration validation failed:"]
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        lines.append(f"  - {location}: {item.get('msg')}")
    return "\n".join(lines)


class ConfigurationManager:
    """Manages loading and validation of configuration from files and env."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[ImporterConfig] = None
        self._load_configuration(config_path)

    @property
    def config(self) -> ImporterConfig:
        return self._config

    def _get_default_config_paths(self) -> List[Path]:
        """Get list of default configuration file paths to try."""
        cwd = Path.cwd()
        return [
            cwd / "bookmark_importer.toml",
            cwd / "bookmark_importer.json",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict[str, Any] = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._apply_env_overrides(config_data)

        try:
            self._config = ImporterConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e)) from e
        except TypeError as e:
            raise ConfigurationError(format_config_error(e)) from e

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix not in (".toml", ".json"):
            raise ConfigurationError(
                f"Unsupported configuration file format: {config_path.suffix}"
            )

        try:
            if suffix == ".toml":
                return toml.load(config_path)
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError, toml.TomlDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}"
            ) from e

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> None:
        """Apply environment variable overrides."""
        if os.getenv(OFFLINE_ENV_VAR, "").lower() in ("1", "true", "yes"):
            network = config_data.setdefault("network", {})
            network["offline"] = True

    def update_from_cli_args(self, args: Dict[str, Any]) -> None:
        """
        Update configuration from command-line arguments.

        Args:
            args: Dictionary of parsed arguments; ``None`` values are ignored
        """
        data = self._config.model_dump()
        if args.get("strict"):
            data["paging"]["smart_compact"] = False
        if args.get("store") is not None:
            data["store_path"] = Path(args["store"])
        if args.get("timeout") is not None:
            data["network"]["timeout"] = args["timeout"]

        try:
            self._config = ImporterConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e)) from e


def load_config(config_path: Optional[Path] = None) -> ImporterConfig:
    """Convenience wrapper returning a validated configuration."""
    return ConfigurationManager(config_path).config
