"""QR code rendering."""

import io

import qrcode
from PIL import Image

QR_SIZE = 150


def render_qr(text: str, size: int = QR_SIZE) -> Image.Image:
    """Render ``text`` as a black-on-white QR bitmap of ``size`` pixels."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(text)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    return image.resize((size, size), Image.Resampling.NEAREST)


def render_qr_png(text: str, size: int = QR_SIZE) -> bytes:
    buffer = io.BytesIO()
    render_qr(text, size).save(buffer, format="PNG")
    return buffer.getvalue()
