"""Custom exception hierarchy for the Pixoo toolkit.

Provides structured error handling with severity levels and context.
Geometry never raises: only structural violations surface here.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class PixooError(Exception):
    """Base exception for all Pixoo toolkit errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        severity: Error severity level
    """

    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
        }


class ConfigurationError(PixooError):
    """Configuration validation or loading error.

    Raised when:
    - Config file cannot be written
    - Values fail validation on update
    """

    pass


class CanvasError(PixooError, ValueError):
    """Canvas construction error.

    Raised when:
    - Canvas size is not one of the supported panel sizes
    - Source buffer length does not match size * size * 3

    Never raised for out-of-range drawing coordinates.
    """

    severity = ErrorSeverity.CRITICAL


class FrameCountError(PixooError, ValueError):
    """Animation created with a non-positive frame count."""

    severity = ErrorSeverity.WARNING


class FrameIndexError(PixooError, IndexError):
    """Animation frame lookup outside the frame range."""

    severity = ErrorSeverity.WARNING


class ImageLoadError(PixooError):
    """Image decoding errors.

    Raised when:
    - Image file does not exist or cannot be read
    - Pillow cannot identify the image format
    """

    pass


class NetworkError(PixooError):
    """Network operation errors.

    Raised when:
    - Device is unreachable
    - Connection is refused or times out
    """

    pass


class DeviceError(PixooError):
    """Device reported a failed command.

    Carries the device's ``error_code`` for callers that need it.
    """

    def __init__(
        self,
        message: str,
        error_code: int = -1,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["error_code"] = error_code
        super().__init__(message, details)
        self.error_code = error_code
