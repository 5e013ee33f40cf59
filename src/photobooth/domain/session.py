"""Capture session state and its pure transitions.

A booth runs a single ``CaptureSession`` at a time. Every transition below
takes the current session and returns a new one; device I/O, timers and
network calls live in ``photobooth.booth.controller``.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum

from photobooth.domain.images import EncodedImage
from photobooth.domain.media import MediaKind

COLLAGE_FRAME_COUNT = 4


class CaptureMode(StrEnum):
    SINGLE = "single"
    COLLAGE = "collage"


class CollageLayout(StrEnum):
    GRID = "grid"
    STRIP = "strip"


class SessionStatus(StrEnum):
    IDLE = "idle"
    AWAITING_COUNTDOWN = "awaiting_countdown"
    CAPTURING = "capturing"
    COMPOSING = "composing"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CapturedFrame:
    """One still taken during a session."""

    image: EncodedImage
    filter_key: str
    ordinal: int


@dataclass(frozen=True)
class ComposedImage:
    """Flattened result of a session, ready to persist."""

    image: EncodedImage
    kind: MediaKind
    layout: CollageLayout | None = None


@dataclass(frozen=True)
class CaptureSession:
    """Transient booth state. ``frames`` is ordered newest first."""

    mode: CaptureMode = CaptureMode.COLLAGE
    layout: CollageLayout = CollageLayout.GRID
    frames: tuple[CapturedFrame, ...] = field(default_factory=tuple)
    status: SessionStatus = SessionStatus.IDLE
    error: str | None = None

    @property
    def target_frames(self) -> int:
        return 1 if self.mode is CaptureMode.SINGLE else COLLAGE_FRAME_COUNT

    @property
    def is_complete(self) -> bool:
        return len(self.frames) >= self.target_frames

    @property
    def accepts_trigger(self) -> bool:
        return self.status in {
            SessionStatus.IDLE,
            SessionStatus.READY,
            SessionStatus.ERROR,
        }


class InvalidTransition(ValueError):
    """Raised when a transition is applied in the wrong state."""


def begin(session: CaptureSession) -> CaptureSession:
    """Start a new session, dropping frames from any previous one."""
    if not session.accepts_trigger:
        raise InvalidTransition(f"Cannot start a session while {session.status}")
    return replace(
        session, frames=(), status=SessionStatus.AWAITING_COUNTDOWN, error=None
    )


def start_capture(session: CaptureSession) -> CaptureSession:
    """Countdown finished; the next frame is being taken."""
    _expect(session, SessionStatus.AWAITING_COUNTDOWN)
    return replace(session, status=SessionStatus.CAPTURING)


def record_frame(session: CaptureSession, frame: CapturedFrame) -> CaptureSession:
    """Insert a frame at the front and advance to the next state."""
    _expect(session, SessionStatus.CAPTURING)
    frames = (frame, *session.frames)[: session.target_frames]
    if len(frames) < session.target_frames:
        status = SessionStatus.AWAITING_COUNTDOWN
    elif session.mode is CaptureMode.COLLAGE:
        status = SessionStatus.COMPOSING
    else:
        status = SessionStatus.READY
    return replace(session, frames=frames, status=status)


def mark_ready(session: CaptureSession) -> CaptureSession:
    _expect(session, SessionStatus.COMPOSING)
    return replace(session, status=SessionStatus.READY)


def fail(session: CaptureSession, message: str) -> CaptureSession:
    """Move to the error state; frames already taken are kept for display."""
    return replace(session, status=SessionStatus.ERROR, error=message)


def reset(session: CaptureSession) -> CaptureSession:
    """Force the session back to idle with no frames."""
    return replace(session, frames=(), status=SessionStatus.IDLE, error=None)


def switch_mode(session: CaptureSession, mode: CaptureMode) -> CaptureSession:
    return replace(reset(session), mode=mode)


def switch_layout(session: CaptureSession, layout: CollageLayout) -> CaptureSession:
    return replace(reset(session), layout=layout)


def _expect(session: CaptureSession, status: SessionStatus) -> None:
    if session.status is not status:
        raise InvalidTransition(f"Expected {status}, session is {session.status}")
