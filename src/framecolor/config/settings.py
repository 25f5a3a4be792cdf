"""Configuration management for framecolor.

Loads settings from a YAML configuration file with environment variable
overrides. Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from framecolor.domain.models import Color, Palette

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/framecolor.yaml")

RGBA = tuple[int, int, int, int]


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    template_dir: Path | None = Field(
        default=None, description="Directory holding the page template (default: bundled)"
    )
    template_name: str = Field(default="index.html")


class ImageConfig(BaseModel):
    width: int = Field(default=1375, gt=0)
    height: int = Field(default=720, gt=0)
    quality: int = Field(default=90, ge=0, le=100, description="JPEG quality factor")


class PaletteConfig(BaseModel):
    colors: list[RGBA] = Field(
        default=[
            (0, 128, 0, 255),
            (128, 0, 128, 255),
            (255, 0, 0, 255),
            (0, 0, 255, 255),
        ],
        min_length=1,
    )
    default_color: RGBA = Field(default=(255, 255, 255, 255))

    def build_palette(self) -> Palette:
        return Palette.from_tuples(self.colors)

    def build_default_color(self) -> Color:
        return Color.from_tuple(self.default_color)


class StateConfig(BaseModel):
    strategy: Literal["shared", "per_cast"] = Field(default="shared")
    max_casts: int = Field(default=1024, gt=0, description="Per-cast slots kept before LRU eviction")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the framecolor server.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "FRAMECOLOR_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)
    state: StateConfig = Field(default_factory=StateConfig)
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
        # Environment beats the YAML values passed in as init kwargs
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: FRAMECOLOR_* env vars > .env file > PORT env var > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply overrides from non-prefixed environment variables."""
    # Hosting platforms advertise the listen port as PORT
    port = os.environ.get("PORT", "")

    if "server" not in yaml_data or yaml_data["server"] is None:
        yaml_data["server"] = {}

    if port:
        yaml_data["server"]["port"] = port
