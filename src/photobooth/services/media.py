"""Media store service for photos and collages."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol

from photobooth.domain.errors import (
    NotFound,
    PhotoboothError,
    StoreFailure,
    ValidationFailure,
)
from photobooth.domain.images import decode_data_url, extension_for
from photobooth.domain.media import MediaDownload, MediaKind, PersistedMedia

PHOTO_LIST_LIMIT = 100
COLLAGE_LIST_LIMIT = 50

logger = logging.getLogger(__name__)


class MediaRepository(Protocol):
    """Persistence interface for photos and collages."""

    def create_photo(self, filename: str, data_url: str) -> PersistedMedia:
        """Insert a photo row and return it with its generated id."""

    def create_collage(self, title: str, format: str, data_url: str) -> PersistedMedia:
        """Insert a collage row and return it with its generated id."""

    def list_media(
        self, kind: MediaKind, limit: int, include_payload: bool
    ) -> list[PersistedMedia]:
        """Return the most recent rows of a kind, newest first."""

    def get_media(self, kind: MediaKind, media_id: int) -> PersistedMedia | None:
        """Return a full row by id, if present."""

    def delete_media(self, kind: MediaKind, media_id: int) -> bool:
        """Delete a row by id and report whether it existed."""


@dataclass
class MediaService:
    """CRUD over photos and collages plus raw-image re-serving."""

    repository: MediaRepository

    def create_photo(
        self, filename: str | None, data_url: str | None
    ) -> PersistedMedia:
        """Persist a captured photo."""
        if not filename or not data_url:
            raise ValidationFailure("filename and data_url are required")
        with _store_errors("Failed to save photo"):
            photo = self.repository.create_photo(filename, data_url)
        logger.info("Photo saved", extra={"photo_id": photo.id})
        return photo

    def create_collage(
        self, title: str | None, format: str | None, data_url: str | None
    ) -> PersistedMedia:
        """Persist a composed collage; a missing title gets a timestamped one."""
        if not format or not data_url:
            raise ValidationFailure("format and data_url are required")
        resolved_title = title or f"Collage {int(time.time() * 1000)}"
        with _store_errors("Failed to save collage"):
            collage = self.repository.create_collage(resolved_title, format, data_url)
        logger.info("Collage saved", extra={"collage_id": collage.id})
        return collage

    def list_photos(self) -> list[PersistedMedia]:
        with _store_errors("Failed to fetch photos"):
            return self.repository.list_media(
                MediaKind.PHOTO, PHOTO_LIST_LIMIT, include_payload=True
            )

    def list_collages(self) -> list[PersistedMedia]:
        with _store_errors("Failed to fetch collages"):
            return self.repository.list_media(
                MediaKind.COLLAGE, COLLAGE_LIST_LIMIT, include_payload=False
            )

    def get_media(self, kind: MediaKind, media_id: int) -> PersistedMedia:
        """Return a full record or raise ``NotFound``."""
        with _store_errors(f"Failed to fetch {kind.value}"):
            media = self.repository.get_media(kind, media_id)
        if media is None:
            raise NotFound(f"{kind.label} not found")
        return media

    def delete_media(self, kind: MediaKind, media_id: int) -> None:
        with _store_errors(f"Failed to delete {kind.value}"):
            deleted = self.repository.delete_media(kind, media_id)
        if not deleted:
            raise NotFound(f"{kind.label} not found")
        logger.info("Media deleted", extra={"kind": kind.value, "media_id": media_id})

    def download(self, kind: MediaKind, media_id: int) -> MediaDownload:
        """Decode a stored data URL back into raw image bytes."""
        media = self.get_media(kind, media_id)
        if not media.data_url:
            raise ValidationFailure(f"{kind.label} has no image data")
        mime, content = decode_data_url(media.data_url)
        return MediaDownload(
            content=content,
            mime=mime,
            filename=f"photobooth_{kind.value}.{extension_for(mime)}",
        )


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Wrap unexpected repository errors in ``StoreFailure``."""
    try:
        yield
    except PhotoboothError:
        raise
    except Exception as exc:
        logger.exception(action)
        raise StoreFailure(action, str(exc)) from exc
