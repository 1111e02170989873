"""Core module initialization."""

from .exceptions import CosmosRestError, ConfigurationError
from .config_manager import ConfigManager, CosmosConfig, resolve_config
from .logging_config import setup_logging, get_logger

__all__ = [
    "CosmosRestError",
    "ConfigurationError",
    "ConfigManager",
    "CosmosConfig",
    "resolve_config",
    "setup_logging",
    "get_logger",
]
