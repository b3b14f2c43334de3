"""Configuration settings for mailcraft using pydantic-settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_core import ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mailcraft.transport.config import SMTPConfig


class ConfigError(Exception):
    """Custom exception for configuration errors with user-friendly messages."""

    def __init__(self, message: str, file_path: str | None = None, line: int | None = None, col: int | None = None):
        self.file_path = file_path
        self.line = line
        self.col = col
        full_message = message
        if file_path:
            location = f" in {file_path}"
            if line is not None:
                location += f" at line {line}"
                if col is not None:
                    location += f", column {col}"
            full_message = f"Configuration error{location}: {message}"
        super().__init__(full_message)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads configuration from a YAML file.

    Looks for config file in the following order:
    1. MAILCRAFT_CONFIG_FILE environment variable
    2. ./mailcraft.yaml (current directory)
    3. $XDG_CONFIG_HOME/mailcraft/config.yaml (defaults to ~/.config)
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
        if not hasattr(self, "_yaml_data"):
            self._yaml_data = self._read_yaml_file()
        return self._yaml_data

    def _read_yaml_file(self) -> dict[str, Any]:
        """Read YAML config from the first existing candidate path."""
        xdg_config = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        config_paths = [
            os.environ.get("MAILCRAFT_CONFIG_FILE"),
            Path.cwd() / "mailcraft.yaml",
            Path(xdg_config) / "mailcraft" / "config.yaml",
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
            except PermissionError as e:
                raise ConfigError(
                    "Cannot read config file (permission denied)",
                    file_path=str(path_obj),
                ) from e
            except OSError as e:
                raise ConfigError(f"Cannot read config file: {e}", file_path=str(path_obj)) from e

            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError("Top level must be a mapping", file_path=str(path_obj))
            return data

        return {}


def _parse_validation_error(error: ValidationError) -> str:
    """Convert Pydantic ValidationError to user-friendly message."""
    errors = error.errors()
    if not errors:
        return "Unknown validation error"

    err = errors[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = err.get("msg", "")
    if err.get("type") == "missing":
        return f"Missing required field '{loc}'"
    if loc:
        return f"Invalid value for '{loc}': {msg}"
    return msg or str(error)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with MAILCRAFT_ prefix.

    YAML configuration:
        default_from: "Reports <reports@example.com>"
        smtp:
          host: "smtp.example.com"
          port: 587
          username: "reports@example.com"

    The password is best supplied as MAILCRAFT_SMTP__PASSWORD.
    """

    model_config = SettingsConfigDict(env_prefix="MAILCRAFT_", env_nested_delimiter="__")

    smtp: SMTPConfig = Field(default_factory=SMTPConfig)
    default_from: str | None = None

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


def get_settings_eager() -> Settings:
    """Load settings, failing fast with a readable message.

    Raises:
        ConfigError: If the YAML file or any value is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(_parse_validation_error(e)) from e
