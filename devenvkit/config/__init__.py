"""Configuration loading for DevEnvKit."""

from .settings import BootstrapConfig, load_config, parse_config, DEFAULT_CONFIG_FILE

__all__ = ["BootstrapConfig", "load_config", "parse_config", "DEFAULT_CONFIG_FILE"]
