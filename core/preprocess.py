"""Client-side image compression: bounded resize and JPEG re-encode."""

from __future__ import annotations

import io
import logging

from PIL import Image

from core.errors import ProcessingFailed
from core.models import ImageSubmission

logger = logging.getLogger(__name__)

MAX_WIDTH = 1920
MAX_HEIGHT = 1080
JPEG_QUALITY = 0.8


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale ``(width, height)`` down to fit the bounds, keeping aspect ratio.

    Sizes already inside the bounds are returned unchanged.
    """
    if width <= max_width and height <= max_height:
        return width, height
    scale = min(max_width / width, max_height / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def image_resolution(data: bytes) -> tuple[int, int] | None:
    """Pixel size of an encoded image, or ``None`` if it cannot be decoded."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except OSError:
        return None


def compress_image(
    image: ImageSubmission,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    quality: float = JPEG_QUALITY,
) -> ImageSubmission:
    """Return a JPEG copy of ``image`` no larger than the given bounds."""
    try:
        with Image.open(io.BytesIO(image.data)) as src:
            src.load()
            target = fit_within(src.width, src.height, max_width, max_height)
            frame = src.convert("RGB")
    except (OSError, Image.DecompressionBombError) as exc:
        logger.error("Error processing image %s: %s", image.filename, exc)
        raise ProcessingFailed("Failed to load image") from exc

    if target != frame.size:
        frame = frame.resize(target, Image.LANCZOS)

    buf = io.BytesIO()
    frame.save(buf, "JPEG", quality=max(1, min(100, round(quality * 100))))

    compressed = ImageSubmission(
        data=buf.getvalue(),
        mime_type="image/jpeg",
        filename=image.filename,
    )
    logger.info(
        "Compressed %s: %d -> %d bytes (%dx%d)",
        image.filename, image.size, compressed.size, target[0], target[1],
    )
    return compressed
