"""Configuration management for x16remote.

Loads settings from a YAML configuration file with environment variable
overrides (``X16REMOTE_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from x16remote.domain.models import TypingMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/x16remote.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=9090, ge=1, le=65535)
    frame_rate_hz: float = Field(default=60.0, gt=0, description="Scheduler ticks per second")


class KeyboardConfig(BaseModel):
    default_rate_ms: int = Field(default=35, gt=0)
    min_rate_ms: int = Field(default=30, gt=0)
    default_mode: TypingMode = Field(default=TypingMode.NATIVE_ASCII)
    joystick_hold_ms: int = Field(default=50, gt=0)


class InjectorConfig(BaseModel):
    backend: Literal["log", "hid"] = Field(default="log")
    hid_device: str = Field(default="/dev/hidg0")


class ClientConfig(BaseModel):
    base_url: str = Field(default="http://127.0.0.1:9090")
    timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for x16remote.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "X16REMOTE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    keyboard: KeyboardConfig = Field(default_factory=KeyboardConfig)
    injector: InjectorConfig = Field(default_factory=InjectorConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; let the environment override them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data: dict = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
