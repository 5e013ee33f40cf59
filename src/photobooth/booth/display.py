"""Operator-facing feedback for the capture station."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from photobooth.booth.share import Presentation, PresentationKind
from photobooth.domain.session import CapturedFrame

logger = logging.getLogger(__name__)


class BoothDisplay(Protocol):
    """Interface for the booth's screen."""

    def show_caption(self, text: str) -> None:
        """Replace the stage caption."""

    def show_countdown(self, remaining: int) -> None:
        """Show the seconds left; zero hides the countdown."""

    def show_frames(self, frames: tuple[CapturedFrame, ...]) -> None:
        """Refresh the thumbnails, newest first."""

    def show_presentation(self, presentation: Presentation) -> None:
        """Show a QR code, a download affordance or a placeholder."""

    def alert(self, message: str) -> None:
        """Tell the operator something went wrong."""


@dataclass
class ConsoleDisplay(BoothDisplay):
    """Display for headless booths: logs feedback and writes files."""

    output_dir: Path
    written: list[Path] = field(default_factory=list)

    def show_caption(self, text: str) -> None:
        logger.info(text)

    def show_countdown(self, remaining: int) -> None:
        if remaining > 0:
            logger.info("%s...", remaining)

    def show_frames(self, frames: tuple[CapturedFrame, ...]) -> None:
        logger.info("Captured %d frame(s)", len(frames))

    def show_presentation(self, presentation: Presentation) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        qr_image = presentation.qr_image
        if presentation.kind is PresentationKind.QR and qr_image is not None:
            path = self.output_dir / "share_qr.png"
            qr_image.save(path, format="PNG")
            logger.info(
                "Scan to download: %s (QR saved to %s)", presentation.text, path
            )
        elif presentation.kind is PresentationKind.DOWNLOAD and presentation.download:
            path = self.output_dir / (presentation.filename or "photobooth_photo.jpg")
            path.write_bytes(presentation.download)
            logger.info("Capture saved to %s", path)
        else:
            logger.info(presentation.text)
            return
        self.written.append(path)

    def alert(self, message: str) -> None:
        logger.warning(message)
