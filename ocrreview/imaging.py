"""
Image helpers shared by the model client and the PDF writer.
"""

from __future__ import annotations

import io

from PIL import Image

# Errors Pillow raises for unreadable or hostile input
IMAGE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def open_image(image_bytes: bytes) -> Image.Image:
    """Open image bytes with Pillow; the caller closes the image."""
    return Image.open(io.BytesIO(image_bytes))


def image_size(image_bytes: bytes) -> tuple[int, int]:
    """Return (width, height) in pixels."""
    with open_image(image_bytes) as img:
        return img.size


def to_jpeg_bytes(img: Image.Image, quality: int) -> bytes:
    """Flatten `img` onto a white background and encode as JPEG."""
    rgba = img.convert("RGBA")
    background = Image.new("RGB", rgba.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.getchannel("A"))
    buf = io.BytesIO()
    background.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def to_png_bytes(img: Image.Image) -> bytes:
    """Encode `img` as PNG, converting modes PNG cannot hold."""
    if img.mode not in ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"):
        img = img.convert("RGBA")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
