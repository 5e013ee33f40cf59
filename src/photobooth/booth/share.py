"""Turns share links and captures into QR codes or download affordances."""

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit, urlunsplit

from PIL import Image

from photobooth.booth.persistence import MediaClient
from photobooth.domain.errors import PhotoboothError, PresentationFailure
from photobooth.domain.images import decode_data_url, extension_for, is_data_url
from photobooth.qr import render_qr

PLACEHOLDER_TEXT = "QR Ready"

_SHARE_PATH = re.compile(r"^/share/(photo|collage)/\d+/?$")

logger = logging.getLogger(__name__)


class PresentationKind(StrEnum):
    QR = "qr"
    DOWNLOAD = "download"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class Presentation:
    """What the booth should show next to the capture."""

    kind: PresentationKind
    text: str
    qr_image: Image.Image | None = None
    download: bytes | None = None
    filename: str | None = None


@dataclass
class SharePresenter:
    """Render share URLs as QR codes; raw captures become downloads."""

    client: MediaClient

    async def present(
        self, target: str, name: str = "photobooth_photo"
    ) -> Presentation:
        """Never raises; any failure degrades to a "QR Ready" placeholder."""
        try:
            if is_data_url(target):
                return _download(target, name)
            if is_share_url(target):
                url = await self._network_url(target)
                return Presentation(
                    kind=PresentationKind.QR, text=url, qr_image=_qr(url)
                )
            return Presentation(
                kind=PresentationKind.QR, text=target, qr_image=_qr(target)
            )
        except Exception:
            logger.exception("Share presentation failed")
            return Presentation(
                kind=PresentationKind.PLACEHOLDER, text=PLACEHOLDER_TEXT
            )

    async def _network_url(self, share_url: str) -> str:
        """Swap the share URL's host for the one phones can reach."""
        base_url = await self.client.fetch_base_url()
        if not base_url:
            return share_url
        base = urlsplit(base_url)
        parts = urlsplit(share_url)
        return urlunsplit((base.scheme, base.netloc, parts.path, parts.query, ""))


def is_share_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in {"http", "https"} and bool(_SHARE_PATH.match(parts.path))


def _download(data_url: str, name: str) -> Presentation:
    try:
        mime, content = decode_data_url(data_url)
    except PhotoboothError as exc:
        raise PresentationFailure("Capture cannot be offered as a download") from exc
    filename = f"{name}.{extension_for(mime)}"
    return Presentation(
        kind=PresentationKind.DOWNLOAD,
        text=filename,
        download=content,
        filename=filename,
    )


def _qr(text: str) -> Image.Image:
    try:
        return render_qr(text)
    except (ValueError, OSError) as exc:
        raise PresentationFailure(f"QR rendering failed: {exc}") from exc
