"""Load, copy and save raster images.

Images are plain ``PIL.Image.Image`` objects. Loading accepts paths, file
handles, URLs or already-decoded images; saving picks the encoder from the
destination's extension and applies quality/progressive settings only where
the format has them.
"""

from __future__ import annotations

from .encoders import EncoderCapabilities, encoder_params, lookup_encoder, lookup_format
from .image import (
    coerce_image,
    copy_image,
    encode_image,
    load_image,
    parse_extension,
    save_image,
)
from .options import DEFAULT_QUALITY, WriteOptions
from .paths import sanitize_path

__all__ = [
    "DEFAULT_QUALITY",
    "EncoderCapabilities",
    "WriteOptions",
    "coerce_image",
    "copy_image",
    "encode_image",
    "encoder_params",
    "load_image",
    "lookup_encoder",
    "lookup_format",
    "parse_extension",
    "sanitize_path",
    "save_image",
]
