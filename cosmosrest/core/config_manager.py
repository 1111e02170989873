"""
Configuration management for CosmosREST.

Handles loading, validation, and access to the Cosmos DB connection settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cosmosrest.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2018-12-31"

# Logical container names and their defaults
DEFAULT_CONTAINERS: Dict[str, str] = {
    "users": "users",
    "notes": "notes",
    "lifePlans": "lifePlans",
    "modelSettings": "modelSettings",
}

# Environment variables checked for each setting, first match wins
ENV_ENDPOINT: Tuple[str, ...] = ("COSMOS_DB_ENDPOINT", "COSMOS_ENDPOINT")
ENV_MASTER_KEY: Tuple[str, ...] = ("COSMOS_DB_KEY", "COSMOS_KEY")
ENV_DATABASE_ID: Tuple[str, ...] = (
    "COSMOS_DB_DATABASE_ID",
    "COSMOS_DB_DATABASE",
    "COSMOS_DATABASE",
)
ENV_API_VERSION = "COSMOS_DB_API_VERSION"
ENV_CONTAINERS: Dict[str, str] = {
    "users": "COSMOS_DB_USERS_CONTAINER",
    "notes": "COSMOS_DB_NOTES_CONTAINER",
    "lifePlans": "COSMOS_DB_LIFE_PLANS_CONTAINER",
    "modelSettings": "COSMOS_DB_MODEL_SETTINGS_CONTAINER",
}

REQUIRED_SETTINGS: Dict[str, str] = {
    "endpoint": "COSMOS_DB_ENDPOINT",
    "master_key": "COSMOS_DB_KEY",
    "database_id": "COSMOS_DB_DATABASE_ID",
}


class CosmosConfig(BaseModel):
    """Resolved Cosmos DB connection settings. Immutable once created."""

    endpoint: str
    master_key: str = Field(repr=False)
    database_id: str
    api_version: str = DEFAULT_API_VERSION
    containers: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CONTAINERS))

    model_config = ConfigDict(frozen=True)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Strip trailing slashes and require an http(s) URL."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint must be an http(s) URL: {v}")
        return v

    @field_validator("database_id", "master_key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    def container_id(self, name: str) -> str:
        """
        Map a logical container name to the configured container id.

        Unknown names are returned unchanged.
        """
        return self.containers.get(name, name)


class ConfigManager:
    """
    Manages CosmosREST configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. Explicit overrides (keyword arguments, CLI options)
    2. Environment variables (COSMOS_DB_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._environ = environ
        self._config: Optional[CosmosConfig] = None

    def load(
        self,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> CosmosConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            overrides: Dictionary of explicit overrides

        Returns:
            Validated CosmosConfig instance

        Raises:
            ConfigurationError: If a required setting is missing or invalid, or
                the config file cannot be parsed
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading Cosmos DB configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied {len(env_config)} environment variable overrides")

        if overrides:
            overrides = {k: v for k, v in overrides.items() if v is not None}
            config_dict = self._merge_configs(config_dict, overrides)
            logger.info(f"Applied {len(overrides)} explicit overrides")

        missing = self._find_missing(config_dict)
        if missing:
            message = (
                "Cosmos DB is not configured. Missing setting(s): "
                + ", ".join(missing)
                + ". Please set COSMOS_DB_ENDPOINT, COSMOS_DB_KEY and "
                "COSMOS_DB_DATABASE_ID environment variables."
            )
            logger.error(message)
            raise ConfigurationError(message, missing=missing)

        container_ids = config_dict.get("containers") or {}
        if not isinstance(container_ids, dict):
            raise ConfigurationError("Invalid Cosmos DB configuration: containers must be a mapping")
        containers = dict(DEFAULT_CONTAINERS)
        containers.update(container_ids)
        config_dict["containers"] = containers

        try:
            self._config = CosmosConfig(**config_dict)
        except ValueError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid Cosmos DB configuration: {e}") from e

        logger.info("Configuration validated successfully")
        self._log_configuration()
        return self._config

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML or JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the file format is unsupported or the
                content is not a mapping
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        if path.suffix not in ['.yaml', '.yml', '.json']:
            raise ConfigurationError(f"Unsupported config file format: {path.suffix}")

        try:
            with open(path, 'r') as f:
                if path.suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigurationError(f"Failed to parse config file {file_path}: {e}") from e

        data = data or {}
        # Accept either a top-level mapping or one nested under "cosmos"
        if isinstance(data, dict) and "cosmos" in data:
            data = data["cosmos"] or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {file_path} must contain a mapping of settings")
        return data

    def _getenv(self, name: str) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        value = environ.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def _first_env(self, names: Tuple[str, ...]) -> Optional[str]:
        for name in names:
            if value := self._getenv(name):
                return value
        return None

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        if endpoint := self._first_env(ENV_ENDPOINT):
            config["endpoint"] = endpoint
        if master_key := self._first_env(ENV_MASTER_KEY):
            config["master_key"] = master_key
        if database_id := self._first_env(ENV_DATABASE_ID):
            config["database_id"] = database_id
        if api_version := self._getenv(ENV_API_VERSION):
            config["api_version"] = api_version

        for name, env_name in ENV_CONTAINERS.items():
            if container := self._getenv(env_name):
                config.setdefault("containers", {})[name] = container

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _find_missing(config_dict: Dict[str, Any]) -> List[str]:
        missing = []
        for field_name, env_name in REQUIRED_SETTINGS.items():
            value = config_dict.get(field_name)
            if not isinstance(value, str) or not value.strip():
                missing.append(env_name)
        return missing

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with the master key redacted)."""
        if not self._config:
            return

        config_dict = self._config.model_dump()
        config_dict["master_key"] = "***REDACTED***"

        logger.info(f"Active configuration: {json.dumps(config_dict, indent=2)}")


def resolve_config(
    config_file: Optional[str] = None,
    **overrides: Any
) -> CosmosConfig:
    """
    Resolve Cosmos DB settings from overrides, environment and file.

    Raises:
        ConfigurationError: If endpoint, master key or database id is missing
    """
    return ConfigManager().load(config_file=config_file, overrides=overrides or None)
