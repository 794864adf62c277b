"""
Configuration management for MCP Roster.

Settings are loaded from TOML files in order of increasing precedence,
then from MCP_ROSTER_* environment variables, then from explicit overrides.
"""

import os
from pathlib import Path
from typing import Any, List, Optional, Union

import toml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcp_roster.core.exceptions import ConfigError
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILES = [
    "/etc/mcp-roster/config.toml",
    "~/.config/mcp-roster/config.toml",
    "./.mcp-roster.toml",
]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(default=True, description="Enable logging completely")
    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    format_type: str = Field(default="text", description="Log file format (text/json)")
    file: Optional[str] = Field(default=None, description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")
    max_bytes: int = Field(default=5 * 1024 * 1024, description="Max log file size")
    backup_count: int = Field(default=3, description="Number of backup files")

    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        if v not in ["text", "json"]:
            raise ValueError(f"Invalid format type: {v}")
        return v


class ModelScopeConfig(BaseModel):
    """Remote sync provider configuration."""

    base_url: str = Field(default="https://www.modelscope.cn", description="Provider host")
    services_path: str = Field(
        default="/api/v1/mcp/services/operational",
        description="Path listing the servers visible to a token",
    )
    timeout: Optional[float] = Field(
        default=None,
        description="HTTP timeout in seconds, None waits indefinitely",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Provider URL must be http(s): {v}")
        return v.rstrip("/")


class CredentialsConfig(BaseModel):
    """Where the sync token lives in the system keyring."""

    keyring_service: str = Field(default="mcp-roster", description="Keyring service name")
    keyring_username: str = Field(default="modelscope-token", description="Keyring entry name")


class StorageConfig(BaseModel):
    """Local collection storage."""

    servers_file: str = Field(
        default="~/.config/mcp-roster/servers.json",
        description="JSON file holding the ordered server collection",
    )


class Config(BaseSettings):
    """Main configuration class."""

    debug: bool = Field(default=False, description="Enable debug mode")
    config_dir: str = Field(default="~/.config/mcp-roster", description="Configuration directory")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    modelscope: ModelScopeConfig = Field(default_factory=ModelScopeConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = SettingsConfigDict(
        env_prefix="MCP_ROSTER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    def get_config_dir(self) -> Path:
        return Path(os.path.expanduser(self.config_dir))

    def get_log_file(self) -> Optional[Path]:
        """Resolve the log file, relative paths land in the config dir."""
        if not self.logging.file:
            return None
        log_path = Path(os.path.expanduser(self.logging.file))
        if not log_path.is_absolute():
            log_path = self.get_config_dir() / log_path
        return log_path

    def get_servers_file(self) -> Path:
        return Path(os.path.expanduser(self.storage.servers_file))


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Later files override earlier ones section by section.

        Args:
            config_files: TOML files to read, defaults to DEFAULT_CONFIG_FILES
            **overrides: Values applied on top of the files

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the merged values do not validate
        """
        if self._config is not None:
            return self._config

        if config_files is None:
            config_files = DEFAULT_CONFIG_FILES

        config_data: dict = {}
        for config_file in config_files:
            file_path = Path(os.path.expanduser(str(config_file)))
            if not file_path.exists():
                continue
            try:
                file_data = toml.load(file_path)
            except (toml.TomlDecodeError, OSError) as e:
                logger.warning(f"Failed to load config from {file_path}: {e}")
                continue
            _deep_update(config_data, file_data)
            logger.debug(f"Loaded configuration from {file_path}")

        _deep_update(config_data, overrides)

        try:
            self._config = Config(**config_data)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}", error_code="CONFIG_INVALID")

        return self._config

    def get_config(self) -> Config:
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        self._config = None
        return self.load_config(config_files, **overrides)


def _deep_update(target: dict, source: dict) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


_config_manager = ConfigManager()

load_config = _config_manager.load_config
get_config = _config_manager.get_config
reload_config = _config_manager.reload_config
