"""Pydantic settings for Chaptercutter configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from chaptercutter.exceptions import ConfigError


def get_config_dir() -> Path:
    """Get the configuration directory."""
    return Path.home() / ".chaptercutter"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.yaml"


def _load_yaml_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file if it exists.

    Returns:
        Dictionary of configuration values, or empty dict if file doesn't exist.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Cannot read config file: {config_path}", details=str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return data


class OutputSettings(BaseModel):
    """Settings for chapter files."""

    directory: Path | None = None  # None = next to the source PDF
    extension: str = "pdf"
    title_max_chars: int = Field(default=50, ge=1)
    placeholder: str = "_"


class OutlineSettings(BaseModel):
    """Settings for bookmark scanning."""

    max_depth: int | None = Field(default=None, ge=1)  # None = whole tree
    max_nodes: int = Field(default=100_000, ge=1)
    fallback_title: str = "FullDocument"


class SplitSettings(BaseModel):
    """Settings for writing chapters."""

    max_workers: int | None = Field(default=None, ge=1)
    compact: bool = True


class Settings(BaseSettings):
    """Main settings model for Chaptercutter."""

    model_config = SettingsConfigDict(extra="ignore")

    output: OutputSettings = Field(default_factory=OutputSettings)
    outline: OutlineSettings = Field(default_factory=OutlineSettings)
    split: SplitSettings = Field(default_factory=SplitSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Only explicit values and the YAML file; the environment is not consulted.
        return (init_settings,)


def load_settings(config_path: Path | None = None, **overrides: Any) -> Settings:
    """Build settings from the YAML config file plus explicit overrides.

    Args:
        config_path: Config file to read (default ``~/.chaptercutter/config.yaml``).
        **overrides: Top-level sections replacing values from the file.

    Raises:
        ConfigError: If the file is malformed or holds invalid values.
    """
    values = _load_yaml_config(config_path)
    values.update(overrides)
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError("Invalid configuration", details=str(e)) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from (in order of priority, highest first):
    1. YAML config file (~/.chaptercutter/config.yaml)
    2. Default values
    """
    return load_settings()
