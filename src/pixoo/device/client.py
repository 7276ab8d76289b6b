"""Async HTTP client for Divoom Pixoo devices.

Every command is a ``POST http://<ip>/post`` with a JSON body of the form
``{"Command": "<name>", ...params}``. The device answers with a JSON object
whose ``error_code`` is 0 on success.

Transport failures never raise: they come back as
``{"error_code": -1, "message": ...}`` so callers handle device and
network problems the same way.
"""

import logging
import time
from enum import IntEnum
from typing import Any, Literal, Sequence

import httpx

from ..core.errors import DeviceError, NetworkError
from ..core.retry import DEVICE_RETRY_CONFIG, RetryConfig, async_retry
from ..display.canvas import Canvas
from ..display.color import ColorLike, resolve_color, round_half_up, to_hex_string

logger = logging.getLogger(__name__)

Response = dict[str, Any]

_STOPWATCH_STATUS = {"start": 1, "stop": 0, "reset": 2}


class Channel(IntEnum):
    """Device channels selectable with ``set_channel``."""

    FACES = 0
    CLOUD = 1
    VISUALIZER = 2
    CUSTOM = 3


def error_response(message: str) -> Response:
    """Build the error response returned for client-side failures."""
    return {"error_code": -1, "message": message}


def raise_for_error(response: Response, action: str = "Command") -> Response:
    """Return ``response`` if it succeeded, otherwise raise.

    Client-side failures (``error_code`` -1) raise ``NetworkError``; codes
    reported by the device raise ``DeviceError``.
    """
    code = response.get("error_code")
    if code == 0:
        return response
    message = f"{action} failed: {response.get('message', response)}"
    if code == -1:
        raise NetworkError(message)
    raise DeviceError(message, error_code=code if isinstance(code, int) else -1)


class PixooClient:
    """Async client for a single Pixoo device.

    Usage:
        async with PixooClient("192.168.1.100") as client:
            await client.set_brightness(40)
            await client.push(canvas)
    """

    def __init__(
        self,
        ip: str,
        timeout: float = 5.0,
        retry: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            ip: Device address (host or host:port)
            timeout: Per-request timeout in seconds
            retry: Retry policy for connection failures
            transport: Custom httpx transport (e.g. a mock device)
        """
        self.ip = ip
        self.url = f"http://{ip}/post"
        self.timeout = timeout
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._post = async_retry(retry or DEVICE_RETRY_CONFIG)(self._post_once)
        self._pic_id = int(time.time() * 1000) % 10000

    async def __aenter__(self) -> "PixooClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    @property
    def pic_id(self) -> int:
        """ID of the most recently pushed picture."""
        return self._pic_id

    async def _post_once(self, body: dict[str, Any]) -> httpx.Response:
        return await self._http.post(self.url, json=body)

    async def send(self, command: str, params: dict[str, Any] | None = None) -> Response:
        """Send a raw command and return the device's response.

        Args:
            command: Command name, e.g. "Channel/SetBrightness"
            params: Extra fields merged into the request body

        Returns:
            Parsed JSON response, or an error response with
            ``error_code`` -1 for HTTP, transport and decoding failures
        """
        body = {"Command": command, **(params or {})}
        try:
            response = await self._post(body)
        except httpx.TimeoutException:
            logger.warning("%s timed out after %.1fs", command, self.timeout)
            return error_response("Request timed out")
        except (httpx.HTTPError, OSError) as e:
            logger.warning("%s failed: %s", command, e)
            return error_response(str(e))

        if not response.is_success:
            logger.warning("%s returned HTTP %d", command, response.status_code)
            return error_response(f"HTTP {response.status_code} {response.reason_phrase}")

        try:
            data = response.json()
        except ValueError:
            logger.warning("%s returned invalid JSON", command)
            return error_response("Invalid JSON response")
        if not isinstance(data, dict):
            logger.warning("%s returned non-object JSON", command)
            return error_response("Invalid JSON response")
        return data

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    async def reset_gif_id(self) -> Response:
        """Reset the device's picture ID counter."""
        return await self.send("Draw/ResetHttpGifId")

    async def push(self, canvas: Canvas, speed: int = 100) -> Response:
        """Show a single canvas on the display."""
        await self.reset_gif_id()
        self._pic_id += 1
        return await self.send(
            "Draw/SendHttpGif",
            {
                "PicNum": 1,
                "PicWidth": canvas.width,
                "PicOffset": 0,
                "PicID": self._pic_id,
                "PicSpeed": speed,
                "PicData": canvas.to_base64(),
            },
        )

    async def push_animation(self, frames: Sequence[Canvas], speed: int = 100) -> Response:
        """Upload frames as one looping animation.

        Frames are sent one request each under a shared picture ID. The
        upload stops at the first failed frame, resetting the device's
        picture ID so the next push starts clean.

        Args:
            frames: Frame canvases in display order
            speed: Milliseconds per frame

        Returns:
            Response to the last frame sent, or the first failure
        """
        if not frames:
            return error_response("No frames to push")

        await self.reset_gif_id()
        self._pic_id += 1
        response: Response = error_response("No frames to push")
        for i, frame in enumerate(frames):
            response = await self.send(
                "Draw/SendHttpGif",
                {
                    "PicNum": len(frames),
                    "PicWidth": frame.width,
                    "PicOffset": i,
                    "PicID": self._pic_id,
                    "PicSpeed": speed,
                    "PicData": frame.to_base64(),
                },
            )
            if response.get("error_code") != 0:
                logger.warning(
                    "Animation upload failed at frame %d/%d: %s",
                    i + 1,
                    len(frames),
                    response.get("message", response.get("error_code")),
                )
                await self.reset_gif_id()
                return response
        return response

    # -------------------------------------------------------------------------
    # Channel / device control
    # -------------------------------------------------------------------------

    async def get_config(self) -> Response:
        """Fetch all device settings (brightness, rotation, clock, ...)."""
        return await self.send("Channel/GetAllConf")

    async def get_channel(self) -> Response:
        return await self.send("Channel/GetIndex")

    async def set_channel(self, channel: Channel | int) -> Response:
        return await self.send("Channel/SetIndex", {"SelectIndex": int(channel)})

    async def set_brightness(self, brightness: float) -> Response:
        """Set brightness in percent; values are rounded and clamped to 0-100."""
        level = max(0, min(100, round_half_up(brightness)))
        return await self.send("Channel/SetBrightness", {"Brightness": level})

    async def set_screen(self, on: bool) -> Response:
        return await self.send("Channel/OnOffScreen", {"OnOff": 1 if on else 0})

    async def set_clock(self, clock_id: int) -> Response:
        return await self.send("Channel/SetClockSelectId", {"ClockId": clock_id})

    # -------------------------------------------------------------------------
    # Text overlay
    # -------------------------------------------------------------------------

    async def send_text(
        self,
        text_id: int,
        x: int,
        y: int,
        text: str,
        dir: int = 0,
        font: int = 0,
        width: int = 64,
        speed: int = 0,
        color: ColorLike = "#FFFFFF",
        align: int = 1,
    ) -> Response:
        """Overlay device-rendered text on the current picture.

        Args:
            text_id: Overlay slot; reuse it to replace the text
            x: Left edge
            y: Top edge
            text: Text to show
            dir: Scroll direction (0 left, 1 right)
            font: Device font index
            width: Text box width in pixels
            speed: Scroll speed (0 = static)
            color: Hex string sent as-is; other color values are resolved
            align: 1 left, 2 centre, 3 right
        """
        if not isinstance(color, str):
            color = to_hex_string(resolve_color(color))
        return await self.send(
            "Draw/SendHttpText",
            {
                "TextId": text_id,
                "x": x,
                "y": y,
                "dir": dir,
                "font": font,
                "TextWidth": width,
                "TextString": text,
                "speed": speed,
                "color": color,
                "align": align,
            },
        )

    async def clear_text(self, text_id: int) -> Response:
        return await self.send("Draw/ClearHttpText", {"TextId": text_id})

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def set_scoreboard(self, blue: int, red: int) -> Response:
        return await self.send("Tools/SetScoreBoard", {"BlueScore": blue, "RedScore": red})

    async def set_timer(self, minutes: int, seconds: int, start: bool = True) -> Response:
        return await self.send(
            "Tools/SetTimer",
            {"Minute": minutes, "Second": seconds, "Status": 1 if start else 0},
        )

    async def set_stopwatch(self, action: Literal["start", "stop", "reset"]) -> Response:
        """Control the stopwatch tool.

        Raises:
            ValueError: If action is not "start", "stop" or "reset"
        """
        if action not in _STOPWATCH_STATUS:
            raise ValueError(f"Unknown stopwatch action: {action}")
        return await self.send("Tools/SetStopWatch", {"Status": _STOPWATCH_STATUS[action]})

    async def set_noise(self, on: bool) -> Response:
        return await self.send("Tools/SetNoiseStatus", {"NoiseStatus": 1 if on else 0})

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------

    async def play_buzzer(
        self, active_ms: int = 500, off_ms: int = 500, total_ms: int = 3000
    ) -> Response:
        return await self.send(
            "Device/PlayTFGif",
            {
                "ActiveTimeInCycle": active_ms,
                "OffTimeInCycle": off_ms,
                "PlayTotalTime": total_ms,
            },
        )

    async def batch(self, commands: Sequence[dict[str, Any]]) -> Response:
        """Send several commands in one request.

        Each entry is a full command body including its ``Command`` key.
        """
        return await self.send("Draw/CommandList", {"CommandList": list(commands)})
