"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    ENV_CONFIG_PATH,
    ENV_STATE_PATH,
    PROJECT_CONFIG_FILE,
)
from ..models.config import Config

logger = logging.getLogger(__name__)


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from `start` looking for the project configuration file"""
    current = Path(start or Path.cwd()).resolve()

    for directory in [current] + list(current.parents):
        candidate = directory / PROJECT_CONFIG_FILE
        if candidate.is_file():
            return candidate

    return None


class ConfigService:
    """Service for managing project configuration"""

    def __init__(self,
                 config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            config_path: Explicit configuration file; otherwise taken from
                NETLIFY_DEPLOY_CONFIG or found by walking up from the cwd
            environ: Environment mapping (defaults to os.environ)
        """
        self.environ = environ if environ is not None else os.environ

        if config_path is None and self.environ.get(ENV_CONFIG_PATH):
            config_path = self.environ[ENV_CONFIG_PATH]

        if config_path is not None:
            self.config_path = Path(config_path)
        else:
            self.config_path = find_config_file() or Path.cwd() / PROJECT_CONFIG_FILE

        self._config: Optional[Config] = None

    @property
    def project_root(self) -> Path:
        return self.config_path.resolve().parent

    @property
    def config(self) -> Config:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file is missing or malformed
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        try:
            config = Config.from_dict(data)
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}")

        self._resolve_paths(config)

        self._config = config
        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._config

    def _resolve_paths(self, config: Config) -> None:
        """Make relative paths relative to the project root"""
        state_override = self.environ.get(ENV_STATE_PATH)
        if state_override:
            config.state.path = state_override

        state_path = Path(config.state.path)
        if not state_path.is_absolute():
            config.state.path = str(self.project_root / state_path)

        for target in config.targets.values():
            working_dir = Path(target.working_dir)
            if not working_dir.is_absolute():
                target.working_dir = str(self.project_root / working_dir)
