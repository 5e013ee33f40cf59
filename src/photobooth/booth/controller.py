"""Countdown, capture, compose and share orchestration for one booth."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from photobooth.booth.compositor import JPEG_QUALITY, capture_frame
from photobooth.booth.device import CaptureDevice
from photobooth.booth.display import BoothDisplay
from photobooth.booth.filters import FilterPreset, FilterRegistry
from photobooth.booth.layout import compose, decode_frames
from photobooth.booth.persistence import MediaClient, SavedMedia
from photobooth.booth.share import Presentation, SharePresenter
from photobooth.domain import session as transitions
from photobooth.domain.errors import CaptureFailure, DeviceUnavailable
from photobooth.domain.media import MediaKind
from photobooth.domain.session import (
    CapturedFrame,
    CaptureMode,
    CaptureSession,
    CollageLayout,
    ComposedImage,
    SessionStatus,
)

READY_MESSAGE = "Photobooth Ready"
CAPTURE_ERROR_CAPTION = "Error during capture. Click Reset to try again."

logger = logging.getLogger(__name__)


class _SessionDiscarded(Exception):
    """The session was reset while a capture was in flight."""


@dataclass
class CaptureController:
    """Drives ``CaptureSession`` transitions and their side effects."""

    device: CaptureDevice
    filters: FilterRegistry
    client: MediaClient
    presenter: SharePresenter
    display: BoothDisplay
    filter_key: str = "none"
    countdown_seconds: int = 3
    countdown_tick: float = 1.0
    inter_shot_pause: float = 1.0
    jpeg_quality: int = JPEG_QUALITY
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    session: CaptureSession = field(default_factory=CaptureSession)
    last_result: ComposedImage | None = None
    last_saved: SavedMedia | None = None
    _generation: int = field(default=0, init=False, repr=False)
    _capturing: bool = field(default=False, init=False, repr=False)

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def select_filter(self, key: str) -> FilterPreset:
        """Switch the active filter; the preview descriptor is returned."""
        preset = self.filters.resolve(key)
        self.filter_key = preset.key
        return preset

    async def reset(self) -> None:
        """Discard all frames and return to idle."""
        self._discard(transitions.reset(self.session))
        await self._present_ready()

    async def switch_mode(self, mode: CaptureMode) -> None:
        self._discard(transitions.switch_mode(self.session, mode))
        await self._present_ready()

    async def switch_layout(self, layout: CollageLayout) -> None:
        self._discard(transitions.switch_layout(self.session, layout))
        await self._present_ready()

    async def trigger(self) -> ComposedImage | None:
        """Run one full session; a trigger during a capture is ignored."""
        if self._capturing or not self.session.accepts_trigger:
            logger.info(
                "Capture already in progress; ignoring trigger",
                extra={"status": self.session.status.value},
            )
            return None
        self._capturing = True
        generation = self._generation
        self.session = transitions.begin(self.session)
        try:
            return await self._run(generation)
        except _SessionDiscarded:
            logger.info("Session reset during capture; discarding frames")
            return None
        except (DeviceUnavailable, CaptureFailure) as exc:
            logger.warning("Capture failed", exc_info=True)
            self._fail(generation, str(exc))
            return None
        except Exception as exc:
            logger.exception("Unexpected error during capture")
            self._fail(generation, f"Capture failed: {exc}")
            return None
        finally:
            if generation == self._generation:
                self._capturing = False

    async def download(self) -> Presentation | None:
        """Offer the latest result as a local download."""
        if self.last_result is None:
            return None
        presentation = await self.presenter.present(
            self.last_result.image.to_data_url(), name=_download_name(self.last_result)
        )
        self.display.show_presentation(presentation)
        return presentation

    async def _run(self, generation: int) -> ComposedImage:
        total = self.session.target_frames
        for shot in range(1, total + 1):
            await self._countdown(shot, total, generation)
            self.session = transitions.start_capture(self.session)
            preset = self.filters.resolve(self.filter_key)
            image = await asyncio.to_thread(
                capture_frame, self.device, preset.capture, self.jpeg_quality
            )
            self._ensure_current(generation)
            frame = CapturedFrame(image=image, filter_key=preset.key, ordinal=shot)
            self.session = transitions.record_frame(self.session, frame)
            self.display.show_frames(self.session.frames)
            if self.session.status is SessionStatus.AWAITING_COUNTDOWN:
                await self.sleep(self.inter_shot_pause)
                self._ensure_current(generation)

        if self.session.mode is CaptureMode.SINGLE:
            result = ComposedImage(
                image=self.session.frames[0].image, kind=MediaKind.PHOTO
            )
        else:
            self.display.show_caption("Composing collage...")
            result = await self._compose_collage()
            self._ensure_current(generation)
        self.last_result = result
        await self._share(result, generation)
        if self.session.status is SessionStatus.COMPOSING:
            self.session = transitions.mark_ready(self.session)
        self.display.show_caption(_ready_caption(result))
        return result

    async def _compose_collage(self) -> ComposedImage:
        layout = self.session.layout
        try:
            decoded = await decode_frames(
                [frame.image for frame in self.session.frames]
            )
            collage = await asyncio.to_thread(
                compose, decoded, layout, self.jpeg_quality
            )
        except (OSError, ValueError) as exc:
            raise CaptureFailure(f"Could not compose collage: {exc}") from exc
        return ComposedImage(image=collage, kind=MediaKind.COLLAGE, layout=layout)

    async def _countdown(self, shot: int, total: int, generation: int) -> None:
        """Tick down, resolving after at most ``seconds + 1`` tick intervals."""

        async def tick_down() -> None:
            for remaining in range(self.countdown_seconds, 0, -1):
                self._ensure_current(generation)
                self.display.show_countdown(remaining)
                caption = f"Taking in {remaining}s"
                if total > 1:
                    caption = f"{caption} ({shot}/{total})"
                self.display.show_caption(caption)
                await self.sleep(self.countdown_tick)

        failsafe = (self.countdown_seconds + 1) * self.countdown_tick
        try:
            await asyncio.wait_for(tick_down(), timeout=failsafe)
        except TimeoutError:
            logger.warning("Countdown timer stalled; forcing capture")
        self._ensure_current(generation)
        self.display.show_countdown(0)

    async def _share(self, result: ComposedImage, generation: int) -> None:
        """Persist the result and show its QR code, or a download on failure."""
        saved = await self.client.save(result.kind, result.image, _save_meta(result))
        self._ensure_current(generation)
        self.last_saved = saved
        if saved is None:
            self.display.alert("Could not save to the server; download it locally.")
            presentation = await self.presenter.present(
                result.image.to_data_url(), name=_download_name(result)
            )
        else:
            presentation = await self.presenter.present(saved.share_url)
        self._ensure_current(generation)
        self.display.show_presentation(presentation)

    async def _present_ready(self) -> None:
        self.display.show_presentation(await self.presenter.present(READY_MESSAGE))

    def _discard(self, session: CaptureSession) -> None:
        self._generation += 1
        self._capturing = False
        self.session = session
        self.last_result = None
        self.last_saved = None
        self.display.show_countdown(0)
        self.display.show_frames(session.frames)
        self.display.show_caption(f"Ready - {session.mode.value.capitalize()} Mode")

    def _fail(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        self.session = transitions.fail(self.session, message)
        self.display.alert(message)
        self.display.show_caption(CAPTURE_ERROR_CAPTION)

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            raise _SessionDiscarded


def _save_meta(result: ComposedImage) -> dict[str, str]:
    if result.kind is MediaKind.COLLAGE and result.layout is not None:
        return {
            "title": f"Collage {int(time.time() * 1000)}",
            "format": result.layout.value,
        }
    stamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    return {"filename": f"photobooth_photo_{stamp}.jpg"}


def _download_name(result: ComposedImage) -> str:
    return f"photobooth_{result.kind.value}"


def _ready_caption(result: ComposedImage) -> str:
    if result.kind is MediaKind.COLLAGE:
        return "Collage Complete! - Click Download or Capture again"
    return "Photo Ready - Click Download"
