"""Configuration for date store instances.

This module provides the data model that decides where a store lives on disk
and how it persists:
- StoreConfig: Construction options with path resolution
- default_config_home: The per-user configuration home
"""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from datestore.errors import ConfigurationError

DEFAULT_NAME = "date-store"
DEFAULT_SUBDIRECTORY = "date-store"


def default_config_home() -> Path:
    """Return the per-user configuration home.

    Uses ``$XDG_CONFIG_HOME`` when set, otherwise ``~/.config``.
    """
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


class StoreConfig(BaseModel):
    """Options controlling where a store is persisted and how it is written.

    Attributes:
        name: Store name, used as the file name when ``path`` is not set
        path: Full path of the JSON file; overrides name and directory
        directory: Base directory holding ``{name}.json``
        home: Configuration home used to derive the default directory
        write_delay_ms: Coalescing delay before a save hits the disk (0 or None = synchronous)
        json_indent: Indentation of the persisted JSON (None = compact)
        file_mode: Permission bits applied to the written file
    """

    name: Optional[str] = Field(
        default=None,
        description="Store name used for the default file name",
    )
    path: Optional[Path] = Field(
        default=None,
        description="Full path of the JSON file",
    )
    directory: Optional[Path] = Field(
        default=None,
        description="Base directory for the JSON file",
    )
    home: Optional[Path] = Field(
        default=None,
        description="Configuration home used to derive the default directory",
    )
    write_delay_ms: Optional[int] = Field(
        default=5,
        ge=0,
        description="Coalescing delay before flushing to disk in milliseconds",
    )
    json_indent: Optional[int] = Field(
        default=2,
        ge=0,
        description="Indentation of the persisted JSON",
    )
    file_mode: int = Field(
        default=0o600,
        ge=0,
        le=0o777,
        description="Permission bits applied to the written file",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise ValueError("store name must not be empty")
        separators = [sep for sep in ("/", os.sep, os.altsep) if sep]
        if value in (".", "..") or any(sep in value for sep in separators):
            raise ValueError(f"store name must be a plain file name, got {value!r}")
        return value

    @classmethod
    def build(cls, **options: Any) -> "StoreConfig":
        """Create a configuration, converting validation failures.

        Args:
            **options: Field values for the configuration

        Returns:
            Validated StoreConfig

        Raises:
            ConfigurationError: If any option is invalid
        """
        try:
            return cls(**options)
        except ValidationError as e:
            first = e.errors()[0]
            option = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ConfigurationError(first.get("msg", str(e)), option=option) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "StoreConfig":
        """Load configuration from environment variables.

        Environment variables follow the pattern: DATE_STORE_<SETTING_NAME>
        (DATE_STORE_HOME, DATE_STORE_DIR, DATE_STORE_WRITE_DELAY_MS,
        DATE_STORE_JSON_INDENT). Explicit keyword overrides take precedence.

        Returns:
            StoreConfig instance with environment overrides

        Raises:
            ConfigurationError: If an environment value is invalid
        """
        options: dict[str, Any] = {}
        env_map = {
            "home": "DATE_STORE_HOME",
            "directory": "DATE_STORE_DIR",
            "write_delay_ms": "DATE_STORE_WRITE_DELAY_MS",
            "json_indent": "DATE_STORE_JSON_INDENT",
        }
        for field, variable in env_map.items():
            value = os.getenv(variable)
            if value:
                options[field] = value
        options.update(overrides)
        return cls.build(**options)

    @property
    def store_name(self) -> str:
        """Name of the store, falling back to the default name."""
        return self.name or DEFAULT_NAME

    def resolve_home(self) -> Path:
        return self.home if self.home is not None else default_config_home()

    def resolve_directory(self) -> Path:
        if self.directory is not None:
            return self.directory
        return self.resolve_home() / DEFAULT_SUBDIRECTORY

    def resolve_path(self) -> Path:
        """Resolve the full path of the backing JSON file.

        An explicit ``path`` wins; otherwise the file is
        ``{directory}/{name}.json``.

        Returns:
            Path of the backing file
        """
        if self.path is not None:
            return self.path
        return self.resolve_directory() / f"{self.store_name}.json"
