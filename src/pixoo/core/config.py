"""Configuration management with Pydantic validation.

Provides type-safe configuration with:
- Pydantic models for validation
- YAML file persistence
- Thread-safe updates
- Defaults for a Pixoo-64 on the local network
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PIXOO_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/pixoo/config.yaml")


# =============================================================================
# Configuration Models
# =============================================================================


class DeviceConfig(BaseModel):
    """Pixoo device connection settings."""

    ip: str = Field("192.168.1.100", min_length=1, description="Device IP address")
    timeout: float = Field(5.0, ge=0.5, le=60.0, description="Request timeout in seconds")
    brightness: int = Field(50, ge=0, le=100, description="Default brightness %")
    retry_attempts: int = Field(3, ge=1, le=10, description="Attempts per request")
    retry_base_delay: float = Field(0.5, ge=0.0, le=30.0, description="First retry delay")

    @field_validator("ip")
    @classmethod
    def validate_ip(cls, v: str) -> str:
        """Reject URLs; the client builds the URL itself."""
        if "/" in v or " " in v:
            raise ValueError("ip must be a bare host or host:port")
        return v


class RenderConfig(BaseModel):
    """Canvas and preview defaults."""

    size: Literal[16, 32, 64] = Field(64, description="Panel size in pixels")
    font: Literal["5x7", "3x5"] = Field("5x7", description="Default bitmap font")
    letter_spacing: int = Field(1, ge=0, le=8, description="Pixels between glyphs")
    preview_scale: int = Field(8, ge=1, le=32, description="PNG preview upscale factor")
    frame_speed: int = Field(100, ge=10, le=10000, description="Milliseconds per frame")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field("simple", description="Format: simple, structured")
    file: str | None = Field(None, description="Log file path")
    max_size_mb: int = Field(10, ge=1, description="Max log file size")
    backup_count: int = Field(3, ge=0, description="Number of backup files")


class Config(BaseModel):
    """Root configuration model."""

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Manager
# =============================================================================


def default_config_path() -> Path:
    """Resolve the config path from ``PIXOO_CONFIG`` or the user config dir."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


class ConfigManager:
    """Thread-safe configuration manager with file persistence.

    Provides:
    - Pydantic validation on load/save
    - Thread-safe read/write operations
    - Automatic persistence to YAML

    Usage:
        config_manager = ConfigManager("/path/to/config.yaml")
        config = config_manager.get()
        config_manager.update(device={"brightness": 75})
    """

    _instance: "ConfigManager | None" = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, config_path: str | Path) -> None:
        self._config_path = Path(config_path)
        self._config: Config
        self._lock = threading.RLock()
        self._load()

    @property
    def path(self) -> Path:
        """Path of the backing YAML file."""
        return self._config_path

    @classmethod
    def get_instance(cls, config_path: str | Path | None = None) -> "ConfigManager":
        """Get singleton instance.

        Args:
            config_path: Path to config file (only used on first call)

        Returns:
            ConfigManager singleton instance
        """
        with cls._instance_lock:
            if cls._instance is None:
                if config_path is None:
                    config_path = default_config_path()
                cls._instance = cls(config_path)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def _load(self) -> None:
        """Load and validate configuration from file."""
        if self._config_path.exists():
            try:
                with open(self._config_path) as f:
                    data = yaml.safe_load(f) or {}
                self._config = Config.model_validate(data)
                logger.info("Loaded config from %s", self._config_path)
            except (OSError, yaml.YAMLError, ValidationError) as e:
                logger.warning("Failed to load config, using defaults: %s", e)
                self._config = Config()
        else:
            logger.info("Config file not found, using defaults")
            self._config = Config()
            self._save()

    def _save(self) -> None:
        """Persist configuration to file."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            data = self._config.model_dump(mode="json")

            # Write atomically via temp file
            temp_path = self._config_path.with_suffix(".tmp")
            with open(temp_path, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            temp_path.replace(self._config_path)

            logger.debug("Saved config to %s", self._config_path)
        except OSError as e:
            logger.error("Failed to save config: %s", e)
            raise ConfigurationError(
                "Failed to save config",
                details={"path": str(self._config_path)},
                cause=e,
            ) from e

    def get(self) -> Config:
        """Get current configuration (thread-safe copy).

        Returns:
            Deep copy of current configuration
        """
        with self._lock:
            return self._config.model_copy(deep=True)

    def update(self, **kwargs: Any) -> None:
        """Update top-level config sections.

        Args:
            **kwargs: Section names and their new values

        Raises:
            ConfigurationError: If the merged config fails validation
        """
        with self._lock:
            data = self._config.model_dump()
            for key, value in kwargs.items():
                if key not in data:
                    raise ConfigurationError(f"Unknown config section: {key}")
                if isinstance(value, dict):
                    unknown = set(value) - set(data[key])
                    if unknown:
                        raise ConfigurationError(
                            f"Unknown {key} setting: {', '.join(sorted(unknown))}"
                        )
                    data[key].update(value)
                else:
                    data[key] = value
            try:
                self._config = Config.model_validate(data)
            except ValidationError as e:
                raise ConfigurationError(
                    "Invalid configuration update",
                    details={"sections": ",".join(kwargs)},
                    cause=e,
                ) from e
            self._save()


# =============================================================================
# Convenience Functions
# =============================================================================


def get_config() -> Config:
    """Get current configuration from singleton manager.

    Returns:
        Current configuration
    """
    return ConfigManager.get_instance().get()


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance.

    Returns:
        ConfigManager instance
    """
    return ConfigManager.get_instance()
