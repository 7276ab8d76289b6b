"""Core infrastructure module.

Provides foundational components:
- Configuration management with validation
- Custom exception hierarchy
- Structured logging
- Retry logic with exponential backoff
"""

from .config import Config, ConfigManager, get_config, get_config_manager
from .errors import (
    PixooError,
    ConfigurationError,
    CanvasError,
    FrameCountError,
    FrameIndexError,
    ImageLoadError,
    NetworkError,
    DeviceError,
)
from .logging import setup_logging, get_logger
from .retry import async_retry, RetryConfig

__all__ = [
    # Config
    "Config",
    "ConfigManager",
    "get_config",
    "get_config_manager",
    # Errors
    "PixooError",
    "ConfigurationError",
    "CanvasError",
    "FrameCountError",
    "FrameIndexError",
    "ImageLoadError",
    "NetworkError",
    "DeviceError",
    # Logging
    "setup_logging",
    "get_logger",
    # Retry
    "async_retry",
    "RetryConfig",
]
