"""Image decoding, encoding and memory-cost utilities."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from spritecache.errors.exceptions import DecodeError, EncodeError

_BYTES_PER_PIXEL = 4
_MAX_IMAGE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded PIL image.

    Raises DecodeError if the bytes are empty, oversized or not an image.
    """
    if not data:
        raise DecodeError("Empty image data")
    if len(data) > _MAX_IMAGE_SIZE_BYTES:
        raise DecodeError(f"Image too large ({len(data)} bytes, max {_MAX_IMAGE_SIZE_BYTES})")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (
        UnidentifiedImageError,
        OSError,
        SyntaxError,
        ValueError,
        Image.DecompressionBombError,
    ) as e:
        raise DecodeError(f"Cannot decode image: {e}", original=e) from e
    return img


def encode_png(img: Image.Image) -> bytes:
    """Encode an image as PNG bytes for the disk tier."""
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG")
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Cannot encode image as PNG: {e}", original=e) from e
    return buf.getvalue()


def image_cost(img: Image.Image) -> int:
    """Approximate decoded size in bytes (width x height x 4)."""
    width, height = img.size
    return int(width * height * _BYTES_PER_PIXEL)
