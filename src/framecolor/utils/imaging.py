"""Image rendering utilities for framecolor.

Builds solid-color raster buffers and encodes them as JPEG for the
image route and the snapshot command.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from framecolor.domain.models import Color

logger = logging.getLogger(__name__)


class ImageEncodeError(Exception):
    """Raised when a raster cannot be encoded."""


def solid_frame(color: Color, width: int, height: int) -> np.ndarray:
    """Create a BGR (OpenCV order) image with every pixel set to ``color``.

    Alpha is dropped since JPEG carries no transparency.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = color.as_bgr()
    return image


def encode_jpeg(image: np.ndarray, quality: int = 90) -> bytes:
    """Encode a BGR numpy image as JPEG bytes."""
    if not 0 <= quality <= 100:
        raise ValueError(f"JPEG quality must be within 0..100, got {quality}")
    try:
        success, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])
    except cv2.error as e:
        raise ImageEncodeError(f"Failed to encode image to JPEG: {e}") from e
    if not success:
        raise ImageEncodeError("Failed to encode image to JPEG")
    return buffer.tobytes()


def render_color_jpeg(color: Color, width: int = 1375, height: int = 720, quality: int = 90) -> bytes:
    """Render a uniformly filled JPEG of the given size."""
    data = encode_jpeg(solid_frame(color, width, height), quality=quality)
    logger.debug("Rendered %dx%d %s JPEG (%d bytes)", width, height, color.hex, len(data))
    return data
