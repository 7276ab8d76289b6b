"""Shared test fixtures."""

import logging

import pytest
import pytest_asyncio

from pixoo.core.config import ConfigManager
from pixoo.core.retry import NO_RETRY
from pixoo.device.client import PixooClient
from pixoo.device.mock import MockPixooDevice
from pixoo.display.canvas import Canvas

TEST_IP = "192.168.1.100"


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep config and logging changes from leaking between tests."""
    monkeypatch.setenv("PIXOO_CONFIG", str(tmp_path / "config.yaml"))
    ConfigManager.reset_instance()
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    ConfigManager.reset_instance()
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def canvas():
    """A blank 64x64 canvas."""
    return Canvas()


@pytest.fixture
def gray_canvas():
    """A 64x64 canvas cleared to mid gray."""
    return Canvas().clear((128, 128, 128))


@pytest.fixture
def device():
    """A fresh in-process fake device."""
    return MockPixooDevice()


@pytest_asyncio.fixture
async def client(device):
    """A client wired to the fake device, without retry delays."""
    c = PixooClient(TEST_IP, retry=NO_RETRY, transport=device.transport)
    yield c
    await c.aclose()
