"""Configuration management for openfiles using platformdirs."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from platformdirs import user_config_dir, user_state_dir
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import jsonc
from .errors import MalformedStateError
from .models import WalkConfig

logger = logging.getLogger(__name__)

APP_NAME = "openfiles"


class WalkSettings(BaseSettings):
    """Settings read by the walker on every directory it visits."""

    model_config = SettingsConfigDict(
        env_prefix="OPENFILES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown keys in the settings file
    )

    max_recursive_depth: int = Field(default=5, ge=0, description="Deepest directory level to open files from")
    max_files: int = Field(default=100, ge=0, description="Soft limit on files opened per branch")

    exclude_folders: List[str] = Field(
        default=['.git', 'node_modules'],
        description="Folder names never descended into",
    )
    exclude_extensions: List[str] = Field(
        default=[],
        description="File extensions (with the dot) never opened",
    )

    write_state_header: bool = Field(
        default=True,
        description="Write a comment header above the disabled-folder list",
    )

    def to_walk_config(self) -> WalkConfig:
        return WalkConfig(
            max_recursive_depth=self.max_recursive_depth,
            max_files=self.max_files,
            exclude_folders=list(self.exclude_folders),
            exclude_extensions=list(self.exclude_extensions),
        )


class ConfigManager:
    """Locates the settings file and builds fresh settings on request.

    Values are layered as: explicit overrides, the user settings file,
    environment variables, then defaults.
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        state_dir: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        self.config_dir = Path(config_dir or user_config_dir(APP_NAME, APP_NAME))
        self.state_dir = Path(state_dir or user_state_dir(APP_NAME, APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.state_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.log_file = self.state_dir / "openfiles.log"
        self.overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    def _load_file_settings(self) -> Dict[str, Any]:
        """Load the user settings file. Missing or malformed files count as empty."""
        if not self.settings_file.exists():
            return {}

        try:
            data = jsonc.loads(self.settings_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, MalformedStateError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.settings_file}: expected an object")
            return {}
        return data

    def load_settings(self) -> WalkSettings:
        """Build settings from the current state of every source."""
        values = self._load_file_settings()
        values.update(self.overrides)
        try:
            return WalkSettings(**values)
        except ValidationError as e:
            if values == self.overrides:
                raise
            logger.warning(f"Ignoring invalid settings file {self.settings_file}: {e}")
            return WalkSettings(**self.overrides)

    def get_walk_config(self) -> WalkConfig:
        """Return a fresh WalkConfig. Used as the walker's config provider."""
        return self.load_settings().to_walk_config()
