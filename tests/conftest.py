"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest
from PIL import Image

from photobooth.booth.controller import CaptureController
from photobooth.booth.filters import FilterRegistry
from photobooth.booth.persistence import MediaClient, SavedMedia
from photobooth.booth.share import Presentation, SharePresenter
from photobooth.config import Settings
from photobooth.containers import AppContainer
from photobooth.domain.errors import CaptureFailure
from photobooth.domain.images import EncodedImage
from photobooth.domain.media import MediaKind, PersistedMedia
from photobooth.domain.session import CapturedFrame, CaptureMode, CaptureSession
from photobooth.services.media import MediaRepository, MediaService
from photobooth.services.network import NetworkResolver

SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJlLXBsYWNlaG9sZGVy"
)


@dataclass
class InMemoryMediaRepository(MediaRepository):
    """In-memory media repository for tests."""

    rows: dict[MediaKind, dict[int, PersistedMedia]] = field(
        default_factory=lambda: {kind: {} for kind in MediaKind}
    )
    next_id: int = 1
    clock: datetime = field(default_factory=lambda: datetime(2024, 5, 1, tzinfo=UTC))
    fail_with: Exception | None = None

    def create_photo(self, filename: str, data_url: str) -> PersistedMedia:
        return self._insert(
            PersistedMedia(
                id=0,
                kind=MediaKind.PHOTO,
                created_at=None,
                data_url=data_url,
                filename=filename,
            )
        )

    def create_collage(self, title: str, format: str, data_url: str) -> PersistedMedia:
        return self._insert(
            PersistedMedia(
                id=0,
                kind=MediaKind.COLLAGE,
                created_at=None,
                data_url=data_url,
                title=title,
                format=format,
            )
        )

    def list_media(
        self, kind: MediaKind, limit: int, include_payload: bool
    ) -> list[PersistedMedia]:
        self._maybe_fail()
        rows = sorted(
            self.rows[kind].values(), key=lambda row: row.created_at, reverse=True
        )[:limit]
        if include_payload:
            return rows
        return [
            PersistedMedia(
                id=row.id,
                kind=row.kind,
                created_at=row.created_at,
                filename=row.filename,
                title=row.title,
                format=row.format,
            )
            for row in rows
        ]

    def get_media(self, kind: MediaKind, media_id: int) -> PersistedMedia | None:
        self._maybe_fail()
        return self.rows[kind].get(media_id)

    def delete_media(self, kind: MediaKind, media_id: int) -> bool:
        self._maybe_fail()
        return self.rows[kind].pop(media_id, None) is not None

    def _insert(self, row: PersistedMedia) -> PersistedMedia:
        self._maybe_fail()
        self.clock += timedelta(seconds=1)
        stored = PersistedMedia(
            id=self.next_id,
            kind=row.kind,
            created_at=self.clock,
            data_url=row.data_url,
            filename=row.filename,
            title=row.title,
            format=row.format,
        )
        self.rows[row.kind][stored.id] = stored
        self.next_id += 1
        return stored

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


@dataclass
class FakeCaptureDevice:
    """Camera that returns solid frames, cycling through ``colors``."""

    size: tuple[int, int] | None = (320, 240)
    colors: list[tuple[int, int, int]] = field(
        default_factory=lambda: [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
    )
    fail_on_read: int | None = None
    reads: int = 0

    def dimensions(self) -> tuple[int, int] | None:
        return self.size

    def read_frame(self) -> Image.Image:
        self.reads += 1
        if self.fail_on_read is not None and self.reads == self.fail_on_read:
            raise CaptureFailure("Camera returned no frame")
        color = self.colors[(self.reads - 1) % len(self.colors)]
        return Image.new("RGB", self.size or (640, 480), color)

    def close(self) -> None:
        return None


@dataclass
class FakeMediaClient(MediaClient):
    """Media client that records saves and can simulate failures."""

    origin: str = "http://localhost:3000"
    base_url: str | None = "http://192.168.1.20:3000"
    fail_saves: bool = False
    saved: list[tuple[MediaKind, EncodedImage, dict[str, str]]] = field(
        default_factory=list
    )

    async def save(
        self, kind: MediaKind, image: EncodedImage, meta: dict[str, str] | None = None
    ) -> SavedMedia | None:
        if self.fail_saves:
            return None
        self.saved.append((kind, image, dict(meta or {})))
        media_id = len(self.saved)
        return SavedMedia(
            id=media_id,
            kind=kind,
            share_url=f"{self.origin}/share/{kind.value}/{media_id}",
        )

    async def fetch_base_url(self) -> str | None:
        return self.base_url


@dataclass
class RecordingDisplay:
    """Booth display that records everything it is asked to show."""

    captions: list[str] = field(default_factory=list)
    countdowns: list[int] = field(default_factory=list)
    frame_counts: list[int] = field(default_factory=list)
    presentations: list[Presentation] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)

    def show_caption(self, text: str) -> None:
        self.captions.append(text)

    def show_countdown(self, remaining: int) -> None:
        self.countdowns.append(remaining)

    def show_frames(self, frames: tuple[CapturedFrame, ...]) -> None:
        self.frame_counts.append(len(frames))

    def show_presentation(self, presentation: Presentation) -> None:
        self.presentations.append(presentation)

    def alert(self, message: str) -> None:
        self.alerts.append(message)


async def instant_sleep(_seconds: float) -> None:
    return None


def jpeg_bytes(
    color: tuple[int, int, int] = (200, 10, 10), size: tuple[int, int] = (64, 48)
) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


def build_controller(
    mode: CaptureMode = CaptureMode.COLLAGE,
    device: FakeCaptureDevice | None = None,
    client: FakeMediaClient | None = None,
    display: RecordingDisplay | None = None,
    **overrides: object,
) -> CaptureController:
    media_client = client or FakeMediaClient()
    options: dict[str, object] = {
        "countdown_tick": 0.01,
        "inter_shot_pause": 0.0,
        "sleep": instant_sleep,
    }
    options.update(overrides)
    return CaptureController(
        device=device or FakeCaptureDevice(),
        filters=FilterRegistry(),
        client=media_client,
        presenter=SharePresenter(media_client),
        display=display or RecordingDisplay(),
        session=CaptureSession(mode=mode),
        **options,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=SERVICE_KEY,
    )


@pytest.fixture
def media_repository() -> InMemoryMediaRepository:
    return InMemoryMediaRepository()


@pytest.fixture
def container(
    settings: Settings, media_repository: InMemoryMediaRepository
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        media_service=MediaService(media_repository),
        network_resolver=NetworkResolver(
            port=settings.port, address_source=lambda: ["192.168.1.20"]
        ),
        close_resources=close_resources,
    )
