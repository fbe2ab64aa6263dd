"""Image admissibility checks run before an upload is accepted.

Checks run in order and stop at the first failure: MIME type, byte size,
decodability, pixel dimensions and finally a skin-tone ratio heuristic. The
heuristic is a cheap pre-filter; moderation stays the authoritative gate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from habersin.core.errors import ValidationError
from habersin.core.settings import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/gif")

# HSV window treated as skin colored (hue in whole degrees).
SKIN_HUE_RANGE = (0, 50)
SKIN_SATURATION_RANGE = (0.1, 0.6)
SKIN_VALUE_RANGE = (0.2, 1.0)

# Rows analysed per step; keeps float buffers small for large images.
_ROWS_PER_CHUNK = 256


@dataclass(frozen=True)
class ImageUpload:
    """An image file as received from the client."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def skin_mask(rgb: np.ndarray) -> np.ndarray:
    """Return a boolean mask of skin-colored pixels for an ``(..., 3)`` uint8 array."""
    channels = rgb.astype(np.float64) / 255.0
    r, g, b = channels[..., 0], channels[..., 1], channels[..., 2]

    high = np.maximum(np.maximum(r, g), b)
    low = np.minimum(np.minimum(r, g), b)
    delta = high - low
    safe_delta = np.where(delta == 0, 1.0, delta)

    from_red = (delta != 0) & (high == r)
    from_green = (delta != 0) & ~from_red & (high == g)
    from_blue = (delta != 0) & ~from_red & ~from_green

    hue = np.zeros_like(high)
    hue = np.where(from_red, np.fmod((g - b) / safe_delta, 6.0), hue)
    hue = np.where(from_green, (b - r) / safe_delta + 2.0, hue)
    hue = np.where(from_blue, (r - g) / safe_delta + 4.0, hue)
    # Whole degrees with halves rounded up, negative angles wrapped.
    hue = np.floor(hue * 60.0 + 0.5)
    hue = np.where(hue < 0, hue + 360.0, hue)

    saturation = np.where(high == 0, 0.0, delta / np.where(high == 0, 1.0, high))
    value = high

    return (
        (hue >= SKIN_HUE_RANGE[0]) & (hue <= SKIN_HUE_RANGE[1])
        & (saturation >= SKIN_SATURATION_RANGE[0]) & (saturation <= SKIN_SATURATION_RANGE[1])
        & (value >= SKIN_VALUE_RANGE[0]) & (value <= SKIN_VALUE_RANGE[1])
    )


def skin_pixel_ratio(image: Image.Image) -> float:
    """Fraction of pixels in ``image`` whose color falls in the skin window."""
    with image.convert("RGB") as rgb_image:
        pixels = np.asarray(rgb_image)
    total = pixels.shape[0] * pixels.shape[1]
    if total == 0:
        return 0.0

    skin = 0
    for start in range(0, pixels.shape[0], _ROWS_PER_CHUNK):
        skin += int(np.count_nonzero(skin_mask(pixels[start:start + _ROWS_PER_CHUNK])))
    return skin / total


def validate_image(
    upload: ImageUpload,
    *,
    max_bytes: int | None = None,
    max_dimension: int | None = None,
    skin_threshold: float | None = None,
) -> None:
    """Raise ValidationError unless ``upload`` is an acceptable image.

    Args:
        upload: The uploaded file.
        max_bytes: Size ceiling for this call site (defaults to the submission limit).
        max_dimension: Largest accepted width or height in pixels.
        skin_threshold: Skin-pixel ratio above which the image is rejected.
    """
    max_bytes = settings.submission_image_max_bytes if max_bytes is None else max_bytes
    max_dimension = settings.image_max_dimension if max_dimension is None else max_dimension
    skin_threshold = settings.skin_ratio_threshold if skin_threshold is None else skin_threshold

    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            "Only JPG, PNG and GIF formats are supported.",
            code="unsupported_format",
        )

    if upload.size > max_bytes:
        raise ValidationError(
            f"Image must be smaller than {max_bytes // (1024 * 1024)}MB.",
            code="too_large",
        )

    try:
        image = Image.open(BytesIO(upload.data))
    except Image.DecompressionBombError as err:
        raise ValidationError(
            "Image dimensions are too large.", code="dimensions_too_large"
        ) from err
    # Pillow plugins report malformed chunks as ValueError or SyntaxError too.
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as err:
        raise ValidationError("Image could not be loaded.", code="unreadable") from err

    with image:
        width, height = image.size
        if width > max_dimension or height > max_dimension:
            raise ValidationError("Image dimensions are too large.", code="dimensions_too_large")

        try:
            ratio = skin_pixel_ratio(image)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as err:
            logger.warning("Image analysis failed for %s: %s", upload.filename, err)
            raise ValidationError(
                "An error occurred while analysing the image.",
                code="analysis_failed",
            ) from err

    if ratio > skin_threshold:
        logger.info("Rejected %s with skin ratio %.3f", upload.filename, ratio)
        raise ValidationError(
            "This image may contain inappropriate content.",
            code="inappropriate_content",
        )
