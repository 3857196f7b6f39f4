"""
Festive Frames Configuration
============================

This module handles configuration loading for the image supply pipeline.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    FESTIVE_CONFIG           -> path of the YAML file to load
    FESTIVE_BOOTSTRAP_PATH   -> bootstrap.path
    FESTIVE_API_KEY          -> generation.api_key
    OPENAI_API_KEY           -> generation.api_key (fallback)
    FESTIVE_IMAGES_PER_HOUR  -> generation.images_per_hour
    FESTIVE_IMAGE_MODEL      -> generation.model
    FESTIVE_DISPLAY_WIDTH    -> display.width
    FESTIVE_DISPLAY_HEIGHT   -> display.height
    FESTIVE_FRAME_INTERVAL   -> display.frame_interval_seconds
    FESTIVE_DISPLAY_BACKEND  -> display.backend
    FESTIVE_POOL_MAX_SIZE    -> pool.max_size
    FESTIVE_LOG_LEVEL        -> logging.level

Example:
    from festive_frames.config import load_config

    settings = load_config("config.yaml")
    print(settings.display.width)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class DisplayConfig(BaseModel):
    """Target display configuration."""

    width: int = Field(default=32, ge=1, description="Frame width in pixels")
    height: int = Field(default=32, ge=1, description="Frame height in pixels")
    frame_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Time each frame stays on screen",
    )
    backend: str = Field(
        default="window",
        description="Display sink: 'window' or 'log'",
    )
    window_scale: int = Field(
        default=16,
        ge=1,
        description="Nearest-neighbour upscale factor for the window sink",
    )


class BootstrapConfig(BaseModel):
    """Local bootstrap image set."""

    path: str = Field(
        default="bootstrap_imgs",
        description="Directory holding the filler images",
    )


class GenerationConfig(BaseModel):
    """Generative image source configuration."""

    api_key: Optional[str] = Field(
        default=None,
        description="Bearer credential; absent disables the acquisition worker",
    )
    endpoint: str = Field(
        default="https://api.openai.com/v1/images/generations",
        description="Image generation endpoint",
    )
    model: str = Field(default="dall-e-2", description="Generation model name")
    size: str = Field(default="256x256", description="Requested image size")
    # Parsed by the worker: a bad rate disables the worker, not the app.
    images_per_hour: Union[float, str, None] = Field(
        default=12,
        description="Generation requests per hour",
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for generation and download calls",
    )
    output_prefix: str = Field(
        default="festive_frames",
        description="Prefix of the per-process temporary output directory",
    )
    vocabulary: Optional[List[str]] = Field(
        default=None,
        description="Theme words for prompts (None = built-in vocabulary)",
    )


class PoolConfig(BaseModel):
    """Rotation pool configuration."""

    max_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap on generated images kept for rotation (None = unbounded)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for Festive Frames.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    display: DisplayConfig = Field(default_factory=DisplayConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses FESTIVE_CONFIG or
            searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("FESTIVE_CONFIG")

    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".config" / "festive_frames" / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    if env_path := os.environ.get("FESTIVE_BOOTSTRAP_PATH"):
        config_data.setdefault("bootstrap", {})["path"] = env_path

    # Generation settings
    if env_key := os.environ.get("FESTIVE_API_KEY"):
        config_data.setdefault("generation", {})["api_key"] = env_key
    elif env_key := os.environ.get("OPENAI_API_KEY"):
        config_data.setdefault("generation", {}).setdefault("api_key", env_key)
    if env_rate := os.environ.get("FESTIVE_IMAGES_PER_HOUR"):
        try:
            rate: Union[float, str] = float(env_rate)
        except ValueError:
            logger.warning(f"FESTIVE_IMAGES_PER_HOUR={env_rate!r} is not a number")
            rate = env_rate
        config_data.setdefault("generation", {})["images_per_hour"] = rate
    if env_model := os.environ.get("FESTIVE_IMAGE_MODEL"):
        config_data.setdefault("generation", {})["model"] = env_model

    # Display settings
    if env_w := os.environ.get("FESTIVE_DISPLAY_WIDTH"):
        config_data.setdefault("display", {})["width"] = int(env_w)
    if env_h := os.environ.get("FESTIVE_DISPLAY_HEIGHT"):
        config_data.setdefault("display", {})["height"] = int(env_h)
    if env_interval := os.environ.get("FESTIVE_FRAME_INTERVAL"):
        config_data.setdefault("display", {})["frame_interval_seconds"] = float(env_interval)
    if env_backend := os.environ.get("FESTIVE_DISPLAY_BACKEND"):
        config_data.setdefault("display", {})["backend"] = env_backend

    if env_cap := os.environ.get("FESTIVE_POOL_MAX_SIZE"):
        config_data.setdefault("pool", {})["max_size"] = int(env_cap)

    if env_log := os.environ.get("FESTIVE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

