"""Configuration management for the Photo Taker app."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from dotenv import dotenv_values
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from phototaker.errors import ConfigError


class DeviceConfig(BaseModel):
    """Runtime mode and logging configuration."""

    name: str = "phototaker"
    mode: Literal["production", "development"] = "development"
    log_level: str = "INFO"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000


class CaptureConfig(BaseModel):
    """Photo capture configuration."""

    max_photos_per_user: int = 50
    auto_capture_interval_seconds: float = 1.0
    auto_capture_guard_seconds: float = 30.0
    text_wall_message: str = "Taking photo…"
    text_wall_duration_ms: int = 4000
    follow_up_capture: bool = True


class StorageConfig(BaseModel):
    """Local snapshot and cloud upload configuration."""

    snapshots_dir: str = "snapshots"
    bucket: str | None = None
    upload_prefix: str = "sessions"


class AuthConfig(BaseModel):
    """Webview authentication configuration."""

    user_header: str = "X-Auth-User-Id"
    dev_user_id: str | None = None


class Config(BaseSettings):
    """Main configuration for the Photo Taker app."""

    model_config = SettingsConfigDict(
        env_prefix="PHOTOTAKER_",
        env_nested_delimiter="__",
        env_file=".env",
        populate_by_name=True,
        extra="ignore",
    )

    package_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("package_name", "PACKAGE_NAME"),
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "MENTRAOS_API_KEY"),
    )

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    # Mock mode for development
    mock_mode: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)

    @property
    def snapshots_path(self) -> Path:
        """Snapshots directory, resolved against the working directory."""
        path = Path(self.storage.snapshots_dir)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path

    def require_credentials(self) -> None:
        """Fail fast when the platform credentials are missing.

        Raises:
            ConfigError: If the package name or API key is not set.
        """
        if not self.package_name:
            raise ConfigError("PACKAGE_NAME is not set in .env file")
        if not self.api_key:
            raise ConfigError("MENTRAOS_API_KEY is not set in .env file")


def load_config(
    config_path: Path | str | None = None,
    env_override: bool = True,
) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file. If None, searches standard locations.
        env_override: Whether to allow environment variables to override config.

    Returns:
        Loaded configuration.
    """
    search_paths = [
        Path("/etc/phototaker/config.yaml"),
        Path.home() / ".config" / "phototaker" / "config.yaml",
        Path("config.yaml"),
        Path("configs/phototaker.yaml"),
    ]

    if config_path:
        search_paths.insert(0, Path(config_path))

    config_file: Path | None = None
    for path in search_paths:
        if path.exists():
            config_file = path
            break

    if config_file:
        config = Config.from_yaml(config_file)
    else:
        config = Config()

    if env_override:
        # Plain variable names used by the platform's app templates; the
        # process environment wins over .env
        env = {k: v for k, v in dotenv_values(".env").items() if v is not None}
        env.update(os.environ)

        package_name = env.get("PACKAGE_NAME")
        if package_name:
            config.package_name = package_name

        api_key = env.get("MENTRAOS_API_KEY")
        if api_key:
            config.api_key = api_key

        port = env.get("PORT")
        if port:
            try:
                config.server.port = int(port)
            except ValueError as e:
                raise ConfigError(f"PORT must be an integer, got {port!r}") from e

        bucket = env.get("FIREBASE_BUCKET")
        if bucket:
            config.storage.bucket = bucket

        if env.get("PHOTOTAKER_MOCK_MODE", "").lower() in ("1", "true", "yes"):
            config.mock_mode = True

    return config
