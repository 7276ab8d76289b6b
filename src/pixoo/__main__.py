"""Pixoo toolkit command line.

Usage:
    python -m pixoo [--config PATH] [--debug] <command> ...

Commands:
    preview TEXT --out PATH   Render centred text to a PNG file
    push TEXT                 Render centred text and show it on the device
    brightness N              Set the device brightness (0-100)
    config show|set KEY VAL   Print or change the config file

Device commands accept --ip to override the configured address and
--mock to run against an in-process fake device.
"""

import argparse
import asyncio
import sys
from pathlib import Path

import yaml

from . import __version__
from .core.config import Config, ConfigManager, RenderConfig, get_config, get_config_manager
from .core.errors import ConfigurationError, PixooError
from .core.logging import get_logger, setup_logging
from .core.retry import RetryConfig
from .device.client import PixooClient, Response, raise_for_error
from .device.mock import MockPixooDevice
from .display.canvas import Canvas
from .display.color import ColorLike
from .display.font import TextOptions, draw_text_centered, get_font
from .display.preview import save_png

logger = get_logger(__name__)


def render_text(
    text: str, render: RenderConfig, color: ColorLike = "white", background: ColorLike = "black"
) -> Canvas:
    """Render a line of text centred on a blank canvas."""
    canvas = Canvas(render.size).clear(background)
    options = TextOptions(font=get_font(render.font), letter_spacing=render.letter_spacing)
    y = (canvas.height - options.font.height) // 2
    draw_text_centered(canvas, text, y, color, options)
    return canvas


def build_client(config: Config, ip: str | None = None, mock: bool = False) -> PixooClient:
    """Create a device client from configuration."""
    device = config.device
    retry = RetryConfig(
        max_attempts=device.retry_attempts,
        base_delay=device.retry_base_delay,
    )
    transport = MockPixooDevice().transport if mock else None
    return PixooClient(ip or device.ip, device.timeout, retry=retry, transport=transport)


def _check(response: Response, action: str) -> int:
    raise_for_error(response, action)
    logger.info("%s OK", action)
    return 0


async def _push_text(args: argparse.Namespace, config: Config) -> int:
    canvas = render_text(args.text, config.render, args.color, args.background)
    async with build_client(config, args.ip, args.mock) as client:
        response = await client.push(canvas, speed=config.render.frame_speed)
    return _check(response, "Push")


async def _set_brightness(args: argparse.Namespace, config: Config) -> int:
    async with build_client(config, args.ip, args.mock) as client:
        response = await client.set_brightness(args.level)
    return _check(response, "Brightness")


def cmd_preview(args: argparse.Namespace, config: Config) -> int:
    canvas = render_text(args.text, config.render, args.color, args.background)
    scale = args.scale if args.scale is not None else config.render.preview_scale
    path = save_png(canvas, args.out, scale=scale)
    logger.info("Wrote %s", path)
    return 0


def cmd_push(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(_push_text(args, config))


def cmd_brightness(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(_set_brightness(args, config))


def cmd_config(args: argparse.Namespace, config: Config) -> int:
    if args.action == "set":
        section, _, name = args.key.partition(".")
        if not name:
            raise ConfigurationError(
                "Config key must look like section.name", details={"key": args.key}
            )
        get_config_manager().update(**{section: {name: yaml.safe_load(args.value)}})
        logger.info("Set %s", args.key)
    print(yaml.safe_dump(get_config().model_dump(mode="json"), sort_keys=False), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixoo",
        description="Pixoo rendering toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_text_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("text", help="Text to render")
        sub.add_argument("--color", default="white", help="Text color (name or hex)")
        sub.add_argument("--background", default="black", help="Background color")

    def add_device_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--ip", default=None, help="Device address (overrides config)")
        sub.add_argument("--mock", action="store_true", help="Use a fake in-process device")

    preview = subparsers.add_parser("preview", help="Render text to a PNG file")
    add_text_args(preview)
    preview.add_argument("--out", type=Path, required=True, help="Output PNG path")
    preview.add_argument("--scale", type=int, default=None, help="Upscale factor")
    preview.set_defaults(func=cmd_preview)

    push = subparsers.add_parser("push", help="Show text on the device")
    add_text_args(push)
    add_device_args(push)
    push.set_defaults(func=cmd_push)

    brightness = subparsers.add_parser("brightness", help="Set device brightness")
    brightness.add_argument("level", type=int, help="Brightness 0-100")
    add_device_args(brightness)
    brightness.set_defaults(func=cmd_brightness)

    config_cmd = subparsers.add_parser("config", help="Show or change the config file")
    config_actions = config_cmd.add_subparsers(dest="action", required=True)
    config_actions.add_parser("show", help="Print the current configuration")
    config_set = config_actions.add_parser("set", help="Change one setting")
    config_set.add_argument("key", help="Setting as section.name, e.g. device.ip")
    config_set.add_argument("value", help="New value (parsed as YAML)")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(level="DEBUG" if args.debug else "INFO")

    try:
        config = ConfigManager.get_instance(args.config).get()
    except PixooError as e:
        logger.error("Configuration error: %s", e)
        return 1

    setup_logging(
        level="DEBUG" if args.debug else config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )
    logger.debug("pixoo %s", __version__)

    try:
        return args.func(args, config)
    except PixooError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
