"""Configuration manager for loading and validating sheafy.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from sheafy.domain.config import DEFAULT_BUNDLE_NAME, AppConfig, SheafyConfig
from sheafy.domain.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "sheafy.yml"

DEFAULT_CONFIG_TEMPLATE = f"""\
# sheafy configuration
sheafy:
  # Bundle file written by `sheafy bundle` and read by `sheafy restore`
  bundle_name: {DEFAULT_BUNDLE_NAME}

  # Directory to bundle from and restore into (relative to this file)
  working_dir: .

  # Respect .gitignore files
  use_gitignore: true

  # Extra gitignore-style patterns, evaluated after .gitignore rules
  # ignore_patterns: |
  #   *.log
  #   !important.log
  #   build/

  # Only bundle these extensions (omit to bundle every text file)
  # filters: [py, md, toml]

  # Bundle dot-files and dot-directories (.git is always skipped)
  include_hidden: false

  # Text written before the first file and after the last one
  # prologue: "# Project bundle"
  # epilogue: ""
"""


class ConfigManager:
    """Manages configuration from sheafy.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. sheafy.yml file (searched from current directory upward)
    3. Environment variables (SHEAFY_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "sheafy": {
            "bundle_name": DEFAULT_BUNDLE_NAME,
            "working_dir": ".",
            "use_gitignore": True,
            "ignore_patterns": None,
            "filters": None,
            "include_hidden": False,
            "prologue": None,
            "epilogue": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to sheafy.yml (searches from current dir if None)

        Raises:
            ConfigError: If the file cannot be parsed or validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find sheafy.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.is_file():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigError: If the file is not valid YAML
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigError(f"Config file {self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        section = config.get("sheafy")
        if not isinstance(section, dict):
            return config

        if os.getenv("SHEAFY_BUNDLE_NAME"):
            section["bundle_name"] = os.getenv("SHEAFY_BUNDLE_NAME")

        if os.getenv("SHEAFY_WORKING_DIR"):
            section["working_dir"] = os.getenv("SHEAFY_WORKING_DIR")

        return config

    def get_sheafy_config(self) -> SheafyConfig:
        """Get bundle settings

        Returns:
            Bundle settings model
        """
        return self.config.sheafy

    def get_working_dir(self) -> Path:
        """Resolve the working directory

        Relative paths are resolved against the config file's directory,
        or the current directory when no config file was found.

        Returns:
            Absolute working directory

        Raises:
            ConfigError: If the directory does not exist
        """
        working_dir = Path(self.config.sheafy.working_dir)
        if not working_dir.is_absolute():
            base = self.config_path.parent if self.config_path else Path.cwd()
            working_dir = base / working_dir
        working_dir = working_dir.resolve()
        if not working_dir.is_dir():
            raise ConfigError(f"Working directory does not exist: {working_dir}")
        return working_dir


def write_default_config(directory: Path) -> Path:
    """Create a default sheafy.yml in a directory

    Args:
        directory: Directory to create the file in

    Returns:
        Path of the created file

    Raises:
        ConfigError: If a config file already exists
    """
    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        raise ConfigError(f"Config file already exists: {config_file}")
    config_file.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    logger.info(f"Created default configuration at {config_file}")
    return config_file
