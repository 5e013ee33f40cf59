"""Collage layout rendering."""

import asyncio
import io
import math
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from photobooth.booth.compositor import JPEG_QUALITY, draw_centered_text, encode_jpeg
from photobooth.domain.images import EncodedImage
from photobooth.domain.session import COLLAGE_FRAME_COUNT, CollageLayout

PLACEHOLDER_FILL = "#333333"
PLACEHOLDER_TEXT = "#666666"


@dataclass(frozen=True)
class LayoutSpec:
    """Canvas size, grid shape and padding of a collage layout."""

    width: int
    height: int
    columns: int
    rows: int
    padding: int

    @property
    def cell_size(self) -> tuple[int, int]:
        cell_width = (self.width - self.padding * (self.columns + 1)) // self.columns
        cell_height = (self.height - self.padding * (self.rows + 1)) // self.rows
        return cell_width, cell_height

    def cell_origin(self, index: int) -> tuple[int, int]:
        cell_width, cell_height = self.cell_size
        column = index % self.columns
        row = index // self.columns
        return (
            self.padding + column * (cell_width + self.padding),
            self.padding + row * (cell_height + self.padding),
        )


LAYOUTS: dict[CollageLayout, LayoutSpec] = {
    CollageLayout.GRID: LayoutSpec(
        width=1280, height=960, columns=2, rows=2, padding=16
    ),
    CollageLayout.STRIP: LayoutSpec(
        width=480, height=1280, columns=1, rows=4, padding=12
    ),
}


async def decode_frames(frames: Sequence[EncodedImage]) -> list[Image.Image]:
    """Fully decode encoded frames off the event loop before composing."""
    return await asyncio.gather(
        *(asyncio.to_thread(_decode, frame) for frame in frames)
    )


def render(
    frames: Sequence[Image.Image | None], layout: CollageLayout
) -> Image.Image:
    """Draw up to four decoded frames into the layout's cells.

    Frame ``i`` goes into cell ``i``; missing cells get a labelled
    placeholder.
    """
    shape = LAYOUTS[layout]
    canvas = Image.new("RGB", (shape.width, shape.height), "black")
    cell_width, cell_height = shape.cell_size
    for index in range(COLLAGE_FRAME_COUNT):
        x, y = shape.cell_origin(index)
        frame = frames[index] if index < len(frames) else None
        if frame is not None:
            canvas.paste(cover(frame, (cell_width, cell_height)), (x, y))
            continue
        canvas.paste(PLACEHOLDER_FILL, (x, y, x + cell_width, y + cell_height))
        draw_centered_text(
            canvas,
            (x, y, x + cell_width, y + cell_height),
            f"Frame {index + 1}",
            fill=PLACEHOLDER_TEXT,
            font_size=24,
        )
    return canvas


def compose(
    frames: Sequence[Image.Image | None],
    layout: CollageLayout,
    quality: int = JPEG_QUALITY,
) -> EncodedImage:
    """Render the collage and encode it as JPEG."""
    return encode_jpeg(render(frames, layout), quality)


def cover(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Scale uniformly until ``size`` is filled, then crop the centre."""
    target_width, target_height = size
    scale = max(target_width / image.width, target_height / image.height)
    scaled_width = max(target_width, math.ceil(image.width * scale))
    scaled_height = max(target_height, math.ceil(image.height * scale))
    scaled = image.convert("RGB").resize(
        (scaled_width, scaled_height), Image.Resampling.LANCZOS
    )
    left = (scaled_width - target_width) // 2
    top = (scaled_height - target_height) // 2
    return scaled.crop((left, top, left + target_width, top + target_height))


def _decode(frame: EncodedImage) -> Image.Image:
    image = Image.open(io.BytesIO(frame.data))
    image.load()
    return image.convert("RGB")
