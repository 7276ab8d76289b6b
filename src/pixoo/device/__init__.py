"""Device communication.

Provides:
- PixooClient for the device's HTTP control protocol
- MockPixooDevice, an in-process fake device for tests and dry runs
"""

from .client import Channel, PixooClient, error_response, raise_for_error
from .mock import MockPixooDevice

__all__ = [
    "Channel",
    "PixooClient",
    "error_response",
    "raise_for_error",
    "MockPixooDevice",
]
