"""YAML configuration for DevEnvKit.

Every setting has a default, so the configuration file is optional. A file
can pin a different project folder name or point the bootstrap at another
flake or installer URL:

    version: 1
    project_name: my-course
    config_url: https://example.com/flake.nix
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from devenvkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "devenvkit.yaml"

CONFIG_VERSION = 1


@dataclass
class BootstrapConfig:
    """Settings for a bootstrap run."""

    version: int = CONFIG_VERSION
    project_name: str = "cmput350-f25"
    config_url: str = (
        "https://raw.githubusercontent.com/YuHuaiCui/cmput350-env/main/flake.nix"
    )
    config_filename: str = "flake.nix"
    installer_url: str = "https://nixos.org/nix/install"
    feature_flag: str = "experimental-features = nix-command flakes"
    download_timeout: int = 30


def load_config(config_path: Optional[Path] = None) -> BootstrapConfig:
    """
    Load configuration, falling back to defaults.

    Args:
        config_path: Explicit configuration file. If None, ./devenvkit.yaml
            is used when it exists.

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid
    """
    if config_path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if not default.exists():
            logger.debug("No configuration file, using defaults")
            return BootstrapConfig()
        config_path = default

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if data is None:
        return BootstrapConfig()

    return parse_config(data)


def parse_config(data: dict) -> BootstrapConfig:
    """Validate a configuration mapping and build a BootstrapConfig."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name: f for f in fields(BootstrapConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key, value in data.items():
        expected = known[key].type
        expected = int if expected in (int, "int") else str
        # bool is an int subclass but never a valid value here
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(
                f"Invalid value for '{key}': expected {expected.__name__}, "
                f"got {type(value).__name__}"
            )

    config = BootstrapConfig(**data)

    if config.version != CONFIG_VERSION:
        raise ConfigError(
            f"Unsupported version: {config.version} (expected {CONFIG_VERSION})"
        )
    if config.download_timeout <= 0:
        raise ConfigError("download_timeout must be positive")
    for name in ("project_name", "config_filename"):
        value = getattr(config, name)
        if not value or "/" in value or value in (".", ".."):
            raise ConfigError(f"'{name}' must be a plain file name, got {value!r}")

    return config
