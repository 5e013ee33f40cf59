"""Filter presets shared by the live preview and the captured still.

A preset holds one ``FilterDescriptor`` used twice: rendered as a CSS
filter string for the preview, and applied to the Pillow image when a
frame is baked. Colour steps use the CSS Filter Effects colour matrices so
both renderings agree.
"""

import math
from dataclasses import dataclass, field
from enum import StrEnum

from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from photobooth.domain.images import is_data_url


class FilterOp(StrEnum):
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    SATURATE = "saturate"
    HUE_ROTATE = "hue-rotate"
    BLUR = "blur"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    INVERT = "invert"


@dataclass(frozen=True)
class FilterStep:
    """One filter function. ``amount`` is a ratio, degrees or pixels."""

    op: FilterOp
    amount: float

    @property
    def css(self) -> str:
        if self.op is FilterOp.HUE_ROTATE:
            return f"{self.op.value}({_number(self.amount)}deg)"
        if self.op is FilterOp.BLUR:
            return f"{self.op.value}({_number(self.amount)}px)"
        return f"{self.op.value}({_number(self.amount * 100)}%)"

    def apply(self, image: Image.Image) -> Image.Image:
        if self.op is FilterOp.BLUR:
            return image.filter(ImageFilter.GaussianBlur(radius=self.amount))
        if self.op is FilterOp.BRIGHTNESS:
            return ImageEnhance.Brightness(image).enhance(self.amount)
        if self.op is FilterOp.CONTRAST:
            return ImageEnhance.Contrast(image).enhance(self.amount)
        if self.op is FilterOp.INVERT:
            inverted = ImageOps.invert(image)
            return Image.blend(image, inverted, min(max(self.amount, 0.0), 1.0))
        return image.convert("RGB", _color_matrix(self.op, self.amount))


@dataclass(frozen=True)
class FilterDescriptor:
    """Ordered filter steps; no steps means no effect."""

    steps: tuple[FilterStep, ...] = field(default_factory=tuple)

    @property
    def is_identity(self) -> bool:
        return not self.steps

    @property
    def css(self) -> str:
        if self.is_identity:
            return "none"
        return " ".join(step.css for step in self.steps)

    def apply(self, image: Image.Image) -> Image.Image:
        """Return a filtered copy; the input image is left untouched."""
        result = image.convert("RGB")
        for step in self.steps:
            result = step.apply(result)
        return result


IDENTITY = FilterDescriptor()


@dataclass(frozen=True)
class FilterPreset:
    key: str
    preview: FilterDescriptor
    capture: FilterDescriptor


DEFAULT_PRESETS: dict[str, FilterDescriptor] = {
    "none": IDENTITY,
    "sepia": FilterDescriptor((FilterStep(FilterOp.SEPIA, 1.0),)),
    "grayscale": FilterDescriptor((FilterStep(FilterOp.GRAYSCALE, 1.0),)),
    "blur": FilterDescriptor((FilterStep(FilterOp.BLUR, 3.0),)),
    "pop": FilterDescriptor(
        (FilterStep(FilterOp.HUE_ROTATE, 90.0), FilterStep(FilterOp.SATURATE, 2.0))
    ),
    "invert": FilterDescriptor((FilterStep(FilterOp.INVERT, 1.0),)),
}


class FilterRegistry:
    """Maps filter keys to presets; unknown keys resolve to no effect."""

    def __init__(self, presets: dict[str, FilterDescriptor] | None = None) -> None:
        self._presets = dict(DEFAULT_PRESETS if presets is None else presets)

    @property
    def keys(self) -> list[str]:
        return list(self._presets)

    def resolve(self, key: str | None) -> FilterPreset:
        if not key or is_data_url(key):
            return FilterPreset(key="none", preview=IDENTITY, capture=IDENTITY)
        normalized = key.strip().lower()
        descriptor = self._presets.get(normalized)
        if descriptor is None:
            return FilterPreset(key="none", preview=IDENTITY, capture=IDENTITY)
        return FilterPreset(key=normalized, preview=descriptor, capture=descriptor)


def _color_matrix(op: FilterOp, amount: float) -> tuple[float, ...]:
    """Return a Pillow RGB conversion matrix (3 rows of r, g, b, offset)."""
    if op is FilterOp.GRAYSCALE:
        s = 1 - min(max(amount, 0.0), 1.0)
        rows = (
            (0.2126 + 0.7874 * s, 0.7152 - 0.7152 * s, 0.0722 - 0.0722 * s),
            (0.2126 - 0.2126 * s, 0.7152 + 0.2848 * s, 0.0722 - 0.0722 * s),
            (0.2126 - 0.2126 * s, 0.7152 - 0.7152 * s, 0.0722 + 0.9278 * s),
        )
    elif op is FilterOp.SEPIA:
        s = 1 - min(max(amount, 0.0), 1.0)
        rows = (
            (0.393 + 0.607 * s, 0.769 - 0.769 * s, 0.189 - 0.189 * s),
            (0.349 - 0.349 * s, 0.686 + 0.314 * s, 0.168 - 0.168 * s),
            (0.272 - 0.272 * s, 0.534 - 0.534 * s, 0.131 + 0.869 * s),
        )
    elif op is FilterOp.SATURATE:
        s = max(amount, 0.0)
        rows = (
            (0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s),
            (0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s),
            (0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s),
        )
    elif op is FilterOp.HUE_ROTATE:
        c = math.cos(math.radians(amount))
        s = math.sin(math.radians(amount))
        rows = (
            (
                0.213 + c * 0.787 - s * 0.213,
                0.715 - c * 0.715 - s * 0.715,
                0.072 - c * 0.072 + s * 0.928,
            ),
            (
                0.213 - c * 0.213 + s * 0.143,
                0.715 + c * 0.285 + s * 0.140,
                0.072 - c * 0.072 - s * 0.283,
            ),
            (
                0.213 - c * 0.213 - s * 0.787,
                0.715 - c * 0.715 + s * 0.715,
                0.072 + c * 0.928 + s * 0.072,
            ),
        )
    else:
        raise ValueError(f"{op} is not a colour matrix filter")
    return tuple(value for row in rows for value in (*row, 0.0))


def _number(value: float) -> str:
    return f"{value:g}"
