"""Tests for frame capture and encoding."""

import io

import pytest
from PIL import Image

from photobooth.booth.compositor import (
    PLACEHOLDER_SIZE,
    capture_frame,
    encode_jpeg,
    placeholder_frame,
)
from photobooth.booth.filters import DEFAULT_PRESETS, IDENTITY
from photobooth.domain.errors import CaptureFailure
from tests.conftest import FakeCaptureDevice


def _decode(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data)).convert("RGB")


def test_capture_frame_encodes_jpeg_at_device_size() -> None:
    device = FakeCaptureDevice(size=(320, 240), colors=[(250, 0, 0)])

    image = capture_frame(device, IDENTITY)

    assert image.mime == "image/jpeg"
    assert image.to_data_url().startswith("data:image/jpeg;base64,")
    assert (image.width, image.height) == (320, 240)
    assert image.data[:2] == b"\xff\xd8"
    red, green, blue = _decode(image.data).getpixel((160, 120))
    assert red > 200 and green < 40 and blue < 40


def test_capture_frame_bakes_filter_without_leaking() -> None:
    device = FakeCaptureDevice(colors=[(250, 0, 0)])

    filtered = capture_frame(device, DEFAULT_PRESETS["grayscale"])
    plain = capture_frame(device, IDENTITY)

    red, green, blue = _decode(filtered.data).getpixel((10, 10))
    assert abs(red - green) <= 4 and abs(green - blue) <= 4
    red, green, _blue = _decode(plain.data).getpixel((10, 10))
    assert red > 200 and green < 40


def test_capture_frame_without_dimensions_uses_placeholder() -> None:
    device = FakeCaptureDevice(size=None)

    image = capture_frame(device, IDENTITY)

    assert (image.width, image.height) == PLACEHOLDER_SIZE
    assert device.reads == 0


def test_capture_frame_propagates_device_failure() -> None:
    device = FakeCaptureDevice(fail_on_read=1)

    with pytest.raises(CaptureFailure):
        capture_frame(device, IDENTITY)


def test_placeholder_frame_background() -> None:
    image = placeholder_frame()

    assert image.size == PLACEHOLDER_SIZE
    assert image.getpixel((0, 0)) == (0x22, 0x22, 0x22)


def test_encode_jpeg_respects_quality() -> None:
    noisy = Image.effect_noise((128, 128), 64).convert("RGB")

    low = encode_jpeg(noisy, quality=20)
    high = encode_jpeg(noisy, quality=95)

    assert len(low.data) < len(high.data)
