"""
Client-side image compression.

Shrinks an image before it is sent to the API: downscale to a maximum width,
re-encode as JPEG, and keep whichever of original/re-encoded is smaller.
This is a bandwidth optimisation run by upload clients (see
scripts/upload_photos.py); the API enforces its own limits on whatever
bytes arrive.
"""
import io
import logging
import os
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 0.7
DEFAULT_MAX_WIDTH = 1920


@dataclass
class CompressedImage:
    data: bytes
    content_type: str
    filename: str
    width: Optional[int] = None
    height: Optional[int] = None
    compressed: bool = False


def jpeg_quality(quality: float) -> int:
    """Map a 0-1 quality factor onto Pillow's JPEG scale (1-95)."""
    return max(1, min(95, int(round(quality * 100))))


def scaled_size(width: int, height: int, max_width: int):
    """
    Target dimensions for max_width. Never upscales.

    >>> scaled_size(4000, 3000, 1920)
    (1920, 1440)
    """
    if width <= max_width:
        return width, height
    return max_width, int(round(height * max_width / width))


def _jpeg_filename(filename: str) -> str:
    stem, _ = os.path.splitext(filename)
    return f"{stem or 'image'}.jpg"


def compress_image(
    data: bytes,
    content_type: str,
    filename: str = "image",
    quality: float = DEFAULT_QUALITY,
    max_width: int = DEFAULT_MAX_WIDTH,
) -> CompressedImage:
    """
    Compress an image for upload.

    Non-image content types and undecodable bytes pass through unchanged.
    The result is never larger than the input.
    """
    original = CompressedImage(data=data, content_type=content_type, filename=filename)

    if not (content_type or "").startswith("image/"):
        return original

    try:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            original.width, original.height = img.size

            width, height = scaled_size(img.width, img.height, max_width)
            if (width, height) != img.size:
                img = img.resize((width, height), Image.LANCZOS)

            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=jpeg_quality(quality), optimize=True)
            encoded = buffer.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not decode {filename} for compression, sending original: {e}")
        return original

    if len(encoded) > len(data):
        logger.debug(f"{filename}: re-encoded JPEG is larger ({len(encoded)} > {len(data)}), keeping original")
        return original

    return CompressedImage(
        data=encoded,
        content_type="image/jpeg",
        filename=_jpeg_filename(filename),
        width=width,
        height=height,
        compressed=True,
    )
