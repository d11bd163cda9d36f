"""Bridge between numpy arrays and Pillow images.

Callers declare the array layout explicitly; nothing is inferred from the
shape alone. Arrays are normalized to a single canonical representation
before becoming an image:

- RGB (or single-channel gray)
- uint8
- HWC
"""

from __future__ import annotations

from .image_format import (
    ImageFormat,
    image_from_array,
    image_to_array,
    normalize_numpy_image,
    parse_image_format,
)

__all__ = [
    "ImageFormat",
    "image_from_array",
    "image_to_array",
    "normalize_numpy_image",
    "parse_image_format",
]
