"""Encoded images and data URL helpers."""

import base64
import binascii
import re
from dataclasses import dataclass

from photobooth.domain.errors import InvalidDataUrl

_DATA_URL_PATTERN = re.compile(
    r"^data:(?P<mime>image/[A-Za-z0-9.+-]+);base64,(?P<payload>.*)$", re.DOTALL
)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
}


@dataclass(frozen=True)
class EncodedImage:
    """Encoded image bytes plus the metadata needed to serve them."""

    data: bytes
    mime: str = "image/jpeg"
    width: int | None = None
    height: int | None = None

    def to_data_url(self) -> str:
        """Return the image as a base64 data URL."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime};base64,{encoded}"

    @classmethod
    def from_data_url(cls, data_url: str) -> "EncodedImage":
        """Decode a base64 image data URL."""
        mime, data = decode_data_url(data_url)
        return cls(data=data, mime=mime)


def is_data_url(value: str) -> bool:
    """Return true when the value looks like a data URL."""
    return value.lstrip().lower().startswith("data:")


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a stored ``data:<mime>;base64,<payload>`` URL into MIME and bytes."""
    match = _DATA_URL_PATTERN.match(data_url.strip())
    if match is None:
        raise InvalidDataUrl("Stored image is not a base64 image data URL")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataUrl("Stored image payload is not valid base64") from exc
    return match.group("mime").lower(), data


def extension_for(mime: str) -> str:
    """Return a file extension for an image MIME type."""
    if mime in _EXTENSIONS:
        return _EXTENSIONS[mime]
    subtype = mime.split("/", maxsplit=1)[-1]
    return subtype.split("+", maxsplit=1)[0] or "img"
