"""
Configuration management for ticketkeeper
Uses Pydantic for type-safe configuration with environment variable and YAML support
"""

import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


STATS_MIN_INTERVAL = 600

DEFAULT_CONFIG_PATH = "config.yml"


def _positive_or_default(value: Any, default: int) -> int:
    """Coerce a configured number of seconds, falling back to the default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _default_if_blank(model, value: Any, info: ValidationInfo) -> Any:
    # A key left blank in YAML parses as None
    if value is None:
        return model.model_fields[info.field_name].get_default(call_default_factory=True)
    return value


class ConfigSection(BaseModel):
    """A section of config.yml; blank keys take their defaults."""

    @field_validator('*', mode='before')
    @classmethod
    def blank_to_default(cls, v, info: ValidationInfo):
        return _default_if_blank(cls, v, info)


class DatabaseConfig(ConfigSection):
    """Database configuration settings."""
    url: str = "mongodb://localhost:27017"
    database_name: str = "ticketkeeper"
    server_selection_timeout: int = 30000
    connect_timeout: int = 30000


class LoggingConfig(ConfigSection):
    """Logging configuration settings."""
    level: str = "INFO"
    file_enabled: bool = True
    directory: str = "logs"
    max_file_size: int = 10485760
    backup_count: int = 5

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v):
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if not isinstance(v, str) or v.upper() not in allowed:
            return "INFO"
        return v.upper()


class AutoCloseConfig(ConfigSection):
    """Closing of open tickets after a period without messages."""
    enabled: bool = False
    interval_seconds: int = 60
    threshold_seconds: int = 86400

    @field_validator('interval_seconds', mode='before')
    @classmethod
    def default_interval(cls, v):
        return _positive_or_default(v, 60)

    @field_validator('threshold_seconds', mode='before')
    @classmethod
    def default_threshold(cls, v):
        return _positive_or_default(v, 86400)


class AutoDeleteConfig(ConfigSection):
    """Deletion of closed tickets some time after they were closed."""
    enabled: bool = False
    interval_seconds: int = 60
    threshold_seconds: int = 86400

    @field_validator('interval_seconds', mode='before')
    @classmethod
    def default_interval(cls, v):
        return _positive_or_default(v, 60)

    @field_validator('threshold_seconds', mode='before')
    @classmethod
    def default_threshold(cls, v):
        return _positive_or_default(v, 86400)


class StatsChannelsConfig(ConfigSection):
    """Display channels renamed to show ticket counts.

    Each channel id is optional; its name template receives the count
    through the ``{stats}`` placeholder.
    """
    enabled: bool = False
    interval_seconds: int = STATS_MIN_INTERVAL
    total_tickets: Optional[int] = None
    open_tickets: Optional[int] = None
    closed_tickets: Optional[int] = None
    claimed_tickets: Optional[int] = None
    total_tickets_name: str = "Total Tickets: {stats}"
    open_tickets_name: str = "Open Tickets: {stats}"
    closed_tickets_name: str = "Closed Tickets: {stats}"
    claimed_tickets_name: str = "Claimed Tickets: {stats}"

    @field_validator('interval_seconds', mode='before')
    @classmethod
    def clamp_interval(cls, v):
        # Channel renames are heavily rate limited by Discord
        return max(_positive_or_default(v, STATS_MIN_INTERVAL), STATS_MIN_INTERVAL)


class SteamLinksConfig(ConfigSection):
    """Steam profile link resolution in chat."""
    enabled: bool = True
    api_url: str = "https://api.steampowered.com"


class Config(BaseSettings):
    """Main configuration class for ticketkeeper."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )

    # Bot Configuration
    discord_token: str = Field(default="", validation_alias=AliasChoices("DISCORD_TOKEN", "TOKEN", "discord_token"))
    steam_api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("STEAM_API_KEY", "steam_api_key"))
    environment: str = Field(default="production", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    guild_id: Optional[int] = None
    silent_startup: bool = False
    disabled_cogs: List[str] = Field(default_factory=list)
    error_log_channel_id: Optional[int] = None
    blacklist_cleanup_interval_seconds: int = 120

    # Sub-configurations
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    auto_close: AutoCloseConfig = Field(default_factory=AutoCloseConfig)
    auto_delete: AutoDeleteConfig = Field(default_factory=AutoDeleteConfig)
    stats_channels: StatsChannelsConfig = Field(default_factory=StatsChannelsConfig)
    steam_links: SteamLinksConfig = Field(default_factory=SteamLinksConfig)

    def __init__(self, **values):
        super().__init__(**values)
        # DB_URL is the conventional name in deployment environments
        db_url = os.environ.get("DB_URL")
        if db_url and self.database.url == DatabaseConfig().url:
            self.database.url = db_url

    @field_validator('blacklist_cleanup_interval_seconds', mode='before')
    @classmethod
    def default_blacklist_interval(cls, v):
        return _positive_or_default(v, 120)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        allowed = ['development', 'production', 'testing']
        if v not in allowed:
            raise ValueError(f'Environment must be one of: {allowed}')
        return v

    @field_validator('*', mode='before')
    @classmethod
    def blank_to_default(cls, v, info: ValidationInfo):
        return _default_if_blank(cls, v, info)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def read_config_file(path: Union[str, Path]) -> dict:
    """Read the YAML configuration file.

    A missing file yields an empty mapping so every setting takes its default.

    Raises:
        ConfigurationError: the file exists but is not a YAML mapping
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH, **overrides) -> Config:
    """Build a configuration from the YAML file, the environment and overrides."""
    data = read_config_file(path)
    data.update(overrides)
    try:
        return Config(**data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config(os.environ.get("TICKETKEEPER_CONFIG", DEFAULT_CONFIG_PATH))
    return _config
