# Config
"""
Configuration for the Angular i18n text extractor.

Settings come from keyword arguments (the CLI) or from ``NG_I18N_*``
environment variables, optionally loaded from a ``.env`` file.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from ng_i18n_extract.utils.errors import InvalidOptionError

ENV_PREFIX = "NG_I18N_"

KEY_PREFIX_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")
LOCALE_RE = re.compile(r"^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Options recognised by one extraction session."""

    # Input / output
    src_path: Path = Field(Path("./src"), description="Root directory to scan")
    output_path: Path = Field(
        Path("./i18n/messages.json"),
        description="Where the extraction artifact is written",
    )
    locale: str = Field("en", description="Locale tag stored in the artifact")

    # Key generation
    key_prefix: str = Field("app", description="Root namespace for generated keys")
    component_context: bool = Field(
        True,
        description="Namespace keys with a token derived from the file name",
    )
    max_slug_length: int = Field(30, description="Maximum length of the text slug")

    # Behaviour
    replace: bool = Field(False, description="Rewrite source files in place")
    exclude_ts: bool = Field(False, description="Skip component-logic files")
    shared_service_dir: str = Field(
        "shared",
        description="Directory (relative to src_path) holding translate.service.ts",
    )

    # Logging
    log_level: str = "INFO"
    log_file_path: Optional[Path] = None
    dev_mode: bool = False

    @field_validator("key_prefix")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Key prefixes are dotted lowercase tokens, e.g. ``app`` or ``app.admin``."""
        if not KEY_PREFIX_RE.match(v):
            raise ValueError("key_prefix must be a dotted lowercase token such as 'app'")
        return v

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Accept tags like ``en``, ``pt-BR`` or ``zh_Hant``."""
        if not LOCALE_RE.match(v):
            raise ValueError("locale must look like a language tag, e.g. 'en' or 'pt-BR'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("max_slug_length")
    @classmethod
    def validate_max_slug_length(cls, v: int) -> int:
        """Slugs shorter than a few characters are useless as keys."""
        if v < 10:
            raise ValueError("max_slug_length must be at least 10")
        return v

    @classmethod
    def create(cls, **values: Any) -> "Settings":
        """
        Build settings, converting validation failures into ConfigurationError.

        Args:
            **values: Option values; ``None`` values fall back to defaults

        Returns:
            Validated settings

        Raises:
            InvalidOptionError: If an option fails validation
        """
        values = {k: v for k, v in values.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            error = e.errors()[0]
            name = str(error["loc"][0]) if error.get("loc") else "settings"
            raise InvalidOptionError(name, values.get(name), error["msg"]) from e

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None, **overrides: Any) -> "Settings":
        """
        Load settings from ``NG_I18N_*`` environment variables.

        Args:
            env_file: Optional .env file to load first
            **overrides: Explicit values that win over the environment

        Returns:
            Validated settings
        """
        load_dotenv(env_file)

        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)

    def get_log_file_path(self) -> Optional[Path]:
        """Return the log file path, creating its directory if needed."""
        if self.log_file_path is None:
            return None
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        return self.log_file_path


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings (used by tests and the CLI)."""
    global _settings
    _settings = None
