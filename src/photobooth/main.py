"""Command-line capture station."""

import argparse
import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from photobooth.app_logging import configure_logging
from photobooth.booth.controller import CaptureController
from photobooth.booth.device import OpenCvCaptureDevice
from photobooth.booth.display import ConsoleDisplay
from photobooth.booth.filters import FilterRegistry
from photobooth.booth.persistence import HttpxMediaClient
from photobooth.booth.share import SharePresenter
from photobooth.config import BoothSettings
from photobooth.domain.errors import DeviceUnavailable
from photobooth.domain.session import CaptureMode, CaptureSession, CollageLayout

logger = logging.getLogger("photobooth.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photobooth", description="Run one photobooth capture session."
    )
    parser.add_argument("--server", help="photobooth server base URL")
    parser.add_argument("--camera", type=int, help="camera device index")
    parser.add_argument("--mode", choices=[mode.value for mode in CaptureMode])
    parser.add_argument(
        "--layout", choices=[layout.value for layout in CollageLayout]
    )
    parser.add_argument("--filter", choices=FilterRegistry().keys)
    parser.add_argument("--output", help="directory for QR codes and downloads")
    return parser


def settings_from_args(args: argparse.Namespace) -> BoothSettings:
    """Overlay command-line flags on environment settings."""
    overrides = {
        "server_url": args.server,
        "camera_index": args.camera,
        "mode": args.mode,
        "layout": args.layout,
        "filter": args.filter,
        "output_dir": args.output,
    }
    return BoothSettings(
        **{key: value for key, value in overrides.items() if value is not None}
    )


async def run_booth(settings: BoothSettings) -> int:
    """Capture one single shot or collage, share it and save a local copy."""
    client = HttpxMediaClient.create(settings.server_url)
    display = ConsoleDisplay(output_dir=Path(settings.output_dir))
    try:
        device = OpenCvCaptureDevice.open(settings.camera_index)
    except DeviceUnavailable as exc:
        display.alert(f"Webcam Error: {exc}")
        await client.close()
        return 1
    controller = CaptureController(
        device=device,
        filters=FilterRegistry(),
        client=client,
        presenter=SharePresenter(client),
        display=display,
        countdown_seconds=settings.countdown_seconds,
        countdown_tick=settings.countdown_tick,
        inter_shot_pause=settings.inter_shot_pause,
        jpeg_quality=settings.jpeg_quality,
        session=CaptureSession(mode=settings.mode, layout=settings.layout),
    )
    controller.select_filter(settings.filter)
    try:
        result = await controller.trigger()
        if result is None:
            return 1
        await controller.download()
        return 0
    finally:
        device.close()
        await client.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``photobooth`` console script."""
    configure_logging()
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    logger.info(
        "Photobooth - %s mode, server %s", settings.mode.value, settings.server_url
    )
    return asyncio.run(run_booth(settings))


if __name__ == "__main__":
    raise SystemExit(main())
