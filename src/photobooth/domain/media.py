"""Domain models for persisted photos and collages."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class MediaKind(StrEnum):
    """Kind of persisted media; the value is used in share URLs."""

    PHOTO = "photo"
    COLLAGE = "collage"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class PersistedMedia:
    """Represents a stored photo or collage row."""

    id: int
    kind: MediaKind
    created_at: datetime | None
    data_url: str | None = None
    filename: str | None = None
    title: str | None = None
    format: str | None = None


@dataclass(frozen=True)
class MediaDownload:
    """Raw image bytes ready to be streamed as an attachment."""

    content: bytes
    mime: str
    filename: str
