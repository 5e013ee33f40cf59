"""Frame capture and JPEG encoding."""

import io
import logging

from PIL import Image, ImageDraw, ImageFont

from photobooth.booth.device import CaptureDevice
from photobooth.booth.filters import FilterDescriptor
from photobooth.domain.errors import CaptureFailure, PhotoboothError
from photobooth.domain.images import EncodedImage

JPEG_QUALITY = 92
PLACEHOLDER_SIZE = (640, 480)
PLACEHOLDER_CAPTION = "Camera not ready"

logger = logging.getLogger(__name__)


def capture_frame(
    device: CaptureDevice,
    descriptor: FilterDescriptor,
    quality: int = JPEG_QUALITY,
) -> EncodedImage:
    """Grab the current frame, bake the filter in and encode it as JPEG.

    A device that reports no dimensions yields a captioned placeholder
    instead of an error.
    """
    size = device.dimensions()
    if size is None:
        logger.warning("Camera reported no dimensions; using placeholder frame")
        return encode_jpeg(placeholder_frame(), quality)
    try:
        frame = device.read_frame()
        if frame.size != size:
            frame = frame.resize(size)
        filtered = descriptor.apply(frame)
        return encode_jpeg(filtered, quality)
    except PhotoboothError:
        raise
    except Exception as exc:
        raise CaptureFailure(f"Could not capture frame: {exc}") from exc


def placeholder_frame(
    size: tuple[int, int] = PLACEHOLDER_SIZE, caption: str = PLACEHOLDER_CAPTION
) -> Image.Image:
    image = Image.new("RGB", size, "#222222")
    draw_centered_text(image, (0, 0, *size), caption, fill="#999999", font_size=28)
    return image


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> EncodedImage:
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return EncodedImage(
        data=buffer.getvalue(),
        mime="image/jpeg",
        width=image.width,
        height=image.height,
    )


def draw_centered_text(
    image: Image.Image,
    box: tuple[int, int, int, int],
    text: str,
    fill: str,
    font_size: int,
) -> None:
    """Draw ``text`` centred inside ``box`` (left, top, right, bottom)."""
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default(size=font_size)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (right - left)) // 2 - left
    y = box[1] + (box[3] - box[1] - (bottom - top)) // 2 - top
    draw.text((x, y), text, fill=fill, font=font)
