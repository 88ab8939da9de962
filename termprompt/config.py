"""User settings loaded from a YAML file."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .theme import Theme, resolve_theme

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TERMPROMPT_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/termprompt/config.yaml")

PathLike = Union[str, os.PathLike]


class ConfigError(ValueError):
    """A settings or task file could not be read or is invalid."""


class Settings(BaseModel):
    """Defaults applied by the command line front end."""

    theme: dict[str, Any] = Field(default_factory=dict, description="Partial theme override")
    select_limit: int = Field(default=5, ge=1, description="Visible rows of select lists")
    autocomplete_limit: int = Field(default=10, ge=1, description="Maximum autocomplete matches")
    autocomplete_debounce: float = Field(default=0.3, ge=0, description="Seconds of quiet before a lookup")
    spinner: str = Field(default="dots", description="Spinner frame set name")
    spinner_speed: float = Field(default=0.15, gt=0, description="Seconds per spinner frame")
    retry_delay: float = Field(default=1.0, ge=0, description="Seconds between task retries")
    log_level: str = Field(default="WARNING", description="Logging level name")

    def resolved_theme(self) -> Theme:
        return resolve_theme(self.theme or None)


def config_path(path: Optional[PathLike] = None) -> Path:
    """Explicit path, else ``$TERMPROMPT_CONFIG``, else the per-user default."""
    if path is not None:
        return Path(path).expanduser()
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_settings(path: Optional[PathLike] = None) -> Settings:
    """Load settings; a missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid YAML or holds invalid values
    """
    file_path = config_path(path)
    if not file_path.exists():
        logger.debug(f"No settings file at {file_path}, using defaults")
        return Settings()

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read settings file {file_path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {file_path} must contain a mapping")

    try:
        settings = Settings.model_validate(data)
        settings.resolved_theme()
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {file_path}: {e}") from e

    logger.info(f"Loaded settings from {file_path}")
    return settings


def save_settings(settings: Settings, path: Optional[PathLike] = None) -> Path:
    """Write ``settings`` as YAML and return the file path."""
    file_path = config_path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        yaml.dump(settings.model_dump(), f, default_flow_style=False, indent=2, sort_keys=False)
    logger.info(f"Saved settings to {file_path}")
    return file_path
