"""In-process fake Pixoo device for development and testing.

``MockPixooDevice`` plugs into ``PixooClient`` as an httpx transport, so
the real client code runs end to end without a device on the network:

    device = MockPixooDevice()
    async with PixooClient("mock", transport=device.transport) as client:
        await client.push(canvas)
    assert device.last_frame == canvas
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from ..core.errors import CanvasError
from ..display.canvas import Canvas

logger = logging.getLogger(__name__)


@dataclass
class _Failure:
    error_code: int = 1
    status_code: int = 200
    content: bytes | None = None
    exception: Exception | None = None


class MockPixooDevice:
    """Records commands and answers like a Pixoo that accepts everything.

    Keeps enough state (brightness, channel, screen, uploaded frames) for
    read-back commands to answer consistently.
    """

    def __init__(self) -> None:
        self.commands: list[dict[str, Any]] = []
        self.brightness = 50
        self.channel = 0
        self.screen_on = True
        self.clock_id = 0
        self.frames: dict[int, Canvas] = {}
        self.last_frame: Canvas | None = None
        self._failures: dict[int, _Failure] = {}
        self._handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "Channel/GetAllConf": self._get_all_conf,
            "Channel/GetIndex": lambda body: {"SelectIndex": self.channel},
            "Channel/SetIndex": self._set_index,
            "Channel/SetBrightness": self._set_brightness,
            "Channel/OnOffScreen": self._on_off_screen,
            "Channel/SetClockSelectId": self._set_clock,
            "Draw/ResetHttpGifId": self._reset_gif_id,
            "Draw/SendHttpGif": self._send_gif,
            "Draw/CommandList": self._command_list,
        }
        logger.info("MockPixooDevice initialized (mock mode)")

    @property
    def transport(self) -> httpx.MockTransport:
        """A fresh httpx transport routed to this device."""
        return httpx.MockTransport(self.handle)

    @property
    def command_names(self) -> list[str]:
        """Names of every command received, in order."""
        return [body.get("Command", "") for body in self.commands]

    def fail_call(
        self,
        index: int,
        error_code: int = 1,
        status_code: int = 200,
        content: bytes | None = None,
        exception: Exception | None = None,
    ) -> None:
        """Make the ``index``-th request (0-based, counting all calls) fail.

        Args:
            index: Which request to fail
            error_code: Device error code to answer with
            status_code: HTTP status to answer with
            content: Raw body to answer with instead of JSON
            exception: Exception to raise from the transport instead of answering
        """
        self._failures[index] = _Failure(error_code, status_code, content, exception)

    def reset(self) -> None:
        """Forget recorded commands and scripted failures."""
        self.commands.clear()
        self._failures.clear()

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Answer one HTTP request."""
        index = len(self.commands)
        try:
            body = json.loads(request.content)
        except ValueError:
            return httpx.Response(400, json={"error_code": 1, "message": "bad body"})
        self.commands.append(body)
        logger.debug("MockPixooDevice: %s", body.get("Command"))

        failure = self._failures.pop(index, None)
        if failure is not None:
            if failure.exception is not None:
                raise failure.exception
            if failure.content is not None:
                return httpx.Response(failure.status_code, content=failure.content)
            return httpx.Response(failure.status_code, json={"error_code": failure.error_code})

        return httpx.Response(200, json={"error_code": 0, **self._apply(body)})

    def _apply(self, body: dict[str, Any]) -> dict[str, Any]:
        handler = self._handlers.get(body.get("Command", ""))
        if handler is None:
            return {}
        return handler(body)

    # -------------------------------------------------------------------------
    # Command handlers
    # -------------------------------------------------------------------------

    def _get_all_conf(self, body: dict[str, Any]) -> dict[str, Any]:
        return {
            "Brightness": self.brightness,
            "LightSwitch": 1 if self.screen_on else 0,
            "CurClockId": self.clock_id,
            "RotationFlag": 0,
            "MirrorFlag": 0,
            "Time24Flag": 1,
        }

    def _set_index(self, body: dict[str, Any]) -> dict[str, Any]:
        self.channel = int(body.get("SelectIndex", 0))
        return {}

    def _set_brightness(self, body: dict[str, Any]) -> dict[str, Any]:
        self.brightness = int(body.get("Brightness", self.brightness))
        return {}

    def _on_off_screen(self, body: dict[str, Any]) -> dict[str, Any]:
        self.screen_on = bool(body.get("OnOff", 1))
        return {}

    def _set_clock(self, body: dict[str, Any]) -> dict[str, Any]:
        self.clock_id = int(body.get("ClockId", 0))
        return {}

    def _reset_gif_id(self, body: dict[str, Any]) -> dict[str, Any]:
        self.frames.clear()
        return {}

    def _send_gif(self, body: dict[str, Any]) -> dict[str, Any]:
        try:
            frame = Canvas.from_bytes(base64.b64decode(body.get("PicData", ""), validate=True))
        except (binascii.Error, CanvasError) as e:
            logger.warning("MockPixooDevice: undecodable frame: %s", e)
            return {"error_code": 1}
        self.frames[int(body.get("PicOffset", 0))] = frame
        self.last_frame = frame
        return {}

    def _command_list(self, body: dict[str, Any]) -> dict[str, Any]:
        for command in body.get("CommandList", []):
            self._apply(command)
        return {}
