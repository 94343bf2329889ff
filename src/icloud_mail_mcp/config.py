"""Configuration settings for icloud-mail-mcp using pydantic-settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_core import ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from icloud_mail_mcp.email.connectors.config import IMAPConfig
from icloud_mail_mcp.exceptions import ConfigError


class MoveConfig(BaseModel):
    """Tuning for the safe-move protocol."""

    chunk_size: int = Field(default=250, ge=1)
    # Sub-batch sizes tried per chunk, largest first; the last one is the final attempt
    attempt_sizes: list[int] = Field(default_factory=lambda: [250, 100])
    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=2.0, ge=0)
    verify_margin: int = Field(default=50, ge=0)
    history_limit: int = Field(default=5, ge=1)

    @field_validator("attempt_sizes")
    @classmethod
    def _validate_attempt_sizes(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("attempt_sizes must not be empty")
        if any(size < 1 for size in v):
            raise ValueError("attempt_sizes must be positive")
        if any(later >= earlier for earlier, later in zip(v, v[1:])):
            raise ValueError("attempt_sizes must be strictly decreasing")
        return v


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads configuration from a YAML file.

    Looks for config file in the following order:
    1. ICLOUD_MAIL_CONFIG_FILE environment variable
    2. ./icloud-mail.yaml (current directory)
    3. $XDG_CONFIG_HOME/icloud-mail-mcp/config.yaml (defaults to ~/.config)
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML config."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load and cache YAML config file."""
        if not hasattr(self, "_yaml_data"):
            self._yaml_data = self._read_yaml_file()
        return self._yaml_data

    def _read_yaml_file(self) -> dict[str, Any]:
        """Read YAML config from file with improved error messages."""
        xdg_config = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        config_paths = [
            os.environ.get("ICLOUD_MAIL_CONFIG_FILE"),
            Path.cwd() / "icloud-mail.yaml",
            Path(xdg_config) / "icloud-mail-mcp" / "config.yaml",
        ]

        for path in config_paths:
            if not path:
                continue
            path_obj = Path(path)
            if not path_obj.exists():
                continue
            try:
                with open(path_obj) as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                raise ConfigError(
                    f"Invalid YAML syntax: {getattr(e, 'problem', None) or e}",
                    file_path=str(path_obj),
                    line=mark.line + 1 if mark else None,
                    col=mark.column + 1 if mark else None,
                ) from e
            except OSError as e:
                raise ConfigError(
                    f"Cannot read config file: {e}",
                    file_path=str(path_obj),
                ) from e
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError("Top level must be a mapping", file_path=str(path_obj))
            return data

        return {}


def _parse_validation_error(error: ValidationError) -> str:
    """Convert Pydantic ValidationError to user-friendly message."""
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        if err.get("type") == "missing":
            return f"Missing required field '{loc}'"
        if loc:
            return f"Invalid value for '{loc}': {err.get('msg', '')}"
    return str(error)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with IMAP_ prefix.

    Credentials come from IMAP_USER and IMAP_PASSWORD. Everything else may
    also be set in the YAML config file:
        host: imap.mail.me.com
        state_dir: ~/.local/state/icloud-mail-mcp
        move:
          chunk_size: 250
          attempt_sizes: [250, 100]
    """

    model_config = SettingsConfigDict(env_prefix="IMAP_", env_nested_delimiter="__")

    host: str = "imap.mail.me.com"
    port: int = 993
    user: str | None = None
    password: SecretStr | None = None
    ssl: bool = True

    state_dir: Path | None = None
    log_level: str = "INFO"

    move: MoveConfig = Field(default_factory=MoveConfig)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )

    def imap_config(self) -> IMAPConfig:
        """Build the IMAP connection config.

        Raises:
            ConfigError: If credentials are missing.
        """
        if not self.user or self.password is None:
            raise ConfigError("IMAP_USER and IMAP_PASSWORD environment variables are required")
        return IMAPConfig(
            host=self.host,
            port=self.port,
            username=self.user,
            password=self.password,
            ssl=self.ssl,
        )


def get_settings_eager() -> Settings:
    """Load settings with eager validation at startup.

    Raises:
        ConfigError: If configuration is invalid, with a user-friendly message.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(_parse_validation_error(e)) from e
