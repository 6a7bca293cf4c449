"""Configuration management for tasktrack."""

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field

ENV_ENVIRONMENT = "TASKTRACK_ENV"
ENV_DATABASE_URL = "DATABASE_URL"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    request_timeout: float = Field(default=30.0)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: Optional[str] = Field(default=None)
    timeout: float = Field(default=30.0)


class AuthConfig(BaseModel):
    """Session and password configuration."""

    session_ttl_days: int = Field(default=30)
    cookie_name: str = Field(default="auth_session")
    bcrypt_rounds: int = Field(default=10)

    @property
    def session_ttl_ms(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60 * 1000


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")


class Config(BaseModel):
    """Main configuration."""

    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def resolve_database_path(self) -> Path:
        """Return the database file path, defaulting to the user data dir."""
        if self.database.path:
            return Path(strip_file_scheme(self.database.path))
        return Path(user_data_dir("tasktrack")) / "tasktrack.db"


def strip_file_scheme(url: str) -> str:
    """Turn ``file:./db.sqlite`` style URLs into plain paths."""
    if url.startswith("file://"):
        return url[len("file://") :]
    if url.startswith("file:"):
        return url[len("file:") :]
    return url


def apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides on top of a loaded config."""
    environment = os.environ.get(ENV_ENVIRONMENT)
    database_url = os.environ.get(ENV_DATABASE_URL)
    if not environment and not database_url:
        return config

    data = config.model_dump()
    if environment:
        data["environment"] = environment
    if database_url:
        data["database"]["path"] = database_url
    return Config(**data)


class ConfigManager:
    """Manages tasktrack configuration."""

    def __init__(self, profile: str = "default"):
        self.profile = profile
        self.config_dir = Path(user_config_dir("tasktrack"))
        self.config_file = self.config_dir / f"{profile}.json"

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration, with environment overrides applied."""
        if self._config is None:
            self._config = apply_env_overrides(self.load_config())
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return Config(**data)
            except (OSError, ValueError) as e:
                raise RuntimeError(
                    f"Failed to load config {self.config_file}: {e}"
                ) from e
        return Config()

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file.

        Without an argument the stored profile is rewritten as loaded, so
        environment overrides never end up on disk.
        """
        if config is None:
            config = self.load_config()

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(), f, indent=2)
        self._config = None

    def has_key(self, key: str) -> bool:
        """Whether ``key`` names a configuration field."""
        model: Any = Config
        for k in key.split("."):
            fields = getattr(model, "model_fields", None)
            if not fields or k not in fields:
                return False
            model = fields[k].annotation
        return True

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return lookup(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save the profile."""
        keys = key.split(".")
        config_dict = self.load_config().model_dump()

        current = config_dict
        for k in keys[:-1]:
            current = current.setdefault(k, {})
        current[keys[-1]] = value

        self.save_config(Config(**config_dict))

    def reset(self, key: Optional[str] = None) -> None:
        """Reset one key, or the whole profile, to the defaults."""
        if key is None:
            self.save_config(Config())
        else:
            self.set(key, lookup(Config(), key))


def lookup(config: BaseModel, key: str) -> Any:
    """Get a value from a config object using dot notation."""
    value: Any = config
    for k in key.split("."):
        if isinstance(value, BaseModel):
            value = getattr(value, k, None)
        else:
            return None
    return value


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(profile: str = "default") -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None or _config_manager.profile != profile:
        _config_manager = ConfigManager(profile)
    return _config_manager
