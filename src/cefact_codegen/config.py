"""
Centralized settings for the unit-constant generator.

All fields can be set via ``CEFACT_CODEGEN_*`` environment variables (e.g.
``CEFACT_CODEGEN_OUTPUT_DIR=build/generated``) or a ``.env`` file in the
working directory. With nothing set, the generator runs over the bundled
UNECE table and writes the ``cefact_units`` package under ``generated/``.

Tags:
    configuration, settings, pydantic, codegen
"""

from __future__ import annotations

import keyword
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InvalidConfigError

DEFAULT_NAMESPACE_URI = "http://www.opcfoundation.org/UA/units/un/cefact"
DEFAULT_PARTITION_SIZE = 1000


class Precedence(str, Enum):
    """Which partition wins when two partitions register the same unit id."""

    LOWEST_INDEX = "lowest_index"
    HIGHEST_INDEX = "highest_index"


class DuplicateCodePolicy(str, Enum):
    """What to do when two records produce the same constant name."""

    ERROR = "error"
    LAST_WINS = "last_wins"


class CodegenSettings(BaseSettings):
    """Generator configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CEFACT_CODEGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Input / output ───────────────────────────────────────────
    input_path: Path | None = Field(default=None, description="Unit table; bundled table when unset")
    output_dir: Path = Field(default=Path("generated"))
    package_name: str = Field(default="cefact_units")
    echo_stdout: bool = Field(default=True)

    # ── Generated code shape ─────────────────────────────────────
    base_name: str = Field(default="CefactEngineeringUnits")
    namespace_uri: str = Field(default=DEFAULT_NAMESPACE_URI)
    partition_size: int = Field(default=DEFAULT_PARTITION_SIZE, ge=1)
    runtime_module: str = Field(default="cefact_codegen.runtime")

    # ── Conflict policies ────────────────────────────────────────
    precedence: Precedence = Field(default=Precedence.LOWEST_INDEX)
    duplicate_codes: DuplicateCodePolicy = Field(default=DuplicateCodePolicy.ERROR)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("base_name", "package_name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"{value!r} is not a valid Python identifier")
        return value

    @field_validator("runtime_module")
    @classmethod
    def _check_module_path(cls, value: str) -> str:
        if not all(part.isidentifier() for part in value.split(".")):
            raise ValueError(f"{value!r} is not a dotted module path")
        return value


_settings_cache: dict[str, CodegenSettings] = {}


def get_settings(*, _force_reload: bool = False, **overrides: Any) -> CodegenSettings:
    """Load, validate, and cache a :class:`CodegenSettings` instance.

    Overrides with a ``None`` value are ignored so CLI options that were not
    given fall through to the environment. Any effective override produces a
    fresh, uncached instance.

    Raises:
        InvalidConfigError: When a value fails validation.
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}

    if not overrides and not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = CodegenSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or "settings"
        raise InvalidConfigError(
            key,
            first.get("input"),
            f"Invalid configuration for {key}: {first['msg']}",
        ) from e

    if not overrides:
        _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (used by tests)."""
    _settings_cache.clear()


__all__ = [
    "CodegenSettings",
    "DuplicateCodePolicy",
    "Precedence",
    "DEFAULT_NAMESPACE_URI",
    "DEFAULT_PARTITION_SIZE",
    "get_settings",
    "clear_settings_cache",
]
