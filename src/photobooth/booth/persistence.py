"""HTTP client that saves captures to the photobooth server."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from photobooth.domain.images import EncodedImage
from photobooth.domain.media import MediaKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedMedia:
    """Server-assigned id and the share link derived from it."""

    id: int
    kind: MediaKind
    share_url: str


class MediaClient(Protocol):
    """Interface for saving media and reading server config."""

    async def save(
        self, kind: MediaKind, image: EncodedImage, meta: dict[str, str] | None = None
    ) -> SavedMedia | None:
        """Save an image; return None when the server could not store it."""

    async def fetch_base_url(self) -> str | None:
        """Return the server's LAN-reachable base URL, if available."""


@dataclass
class HttpxMediaClient(MediaClient):
    """HTTPX-backed media client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxMediaClient":
        """Create a media client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def save(
        self, kind: MediaKind, image: EncodedImage, meta: dict[str, str] | None = None
    ) -> SavedMedia | None:
        """POST the image as a data URL. Failures are logged, never raised."""
        payload: dict[str, object] = dict(meta or {})
        payload["data_url"] = image.to_data_url()
        url = f"{self.base_url}/api/{kind.value}s"
        try:
            # No timeout: a slow save only delays the share link.
            response = await self.http_client.post(url, json=payload, timeout=None)
            response.raise_for_status()
            media_id = int(response.json()["id"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError):
            logger.exception("Failed to save media", extra={"kind": kind.value})
            return None
        share_url = f"{self.base_url}/share/{kind.value}/{media_id}"
        logger.info("Media saved", extra={"kind": kind.value, "media_id": media_id})
        return SavedMedia(id=media_id, kind=kind, share_url=share_url)

    async def fetch_base_url(self) -> str | None:
        """Read ``baseURL`` from ``GET /api/config``."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/api/config", timeout=5
            )
            response.raise_for_status()
            base_url = response.json().get("baseURL")
        except (httpx.HTTPError, AttributeError, ValueError):
            logger.warning("Config lookup failed", exc_info=True)
            return None
        return str(base_url).rstrip("/") if base_url else None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
