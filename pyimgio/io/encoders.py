"""Encoder lookup over Pillow's codec registry.

Pillow exposes per-format tunables as ``Image.save`` keyword arguments with
different names and scales. This module answers two questions for a file
extension: which Pillow format writes it, and which of the quality and
progressive axes that format understands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from PIL import Image

from pyimgio.errors import UnsupportedFormatError
from pyimgio.io.options import WriteOptions

# Formats with a lossy quality axis on a 0..100 integer scale.
_QUALITY_FORMATS = frozenset({"JPEG", "MPO", "WEBP", "AVIF"})

# Format -> (save keyword, image.info keys the decoder uses for the same flag).
_PROGRESSIVE_FORMATS = {
    "JPEG": ("progressive", ("progressive", "progression")),
    "MPO": ("progressive", ("progressive", "progression")),
    "GIF": ("interlace", ("interlace",)),
}


@dataclass(frozen=True)
class EncoderCapabilities:
    """What the encoder registered for an extension can be told to do."""

    format: str
    extension: str
    supports_quality: bool
    supports_progressive: bool


def normalize_extension(extension: str) -> str:
    ext = str(extension).strip().lower()
    return ext[1:] if ext.startswith(".") else ext


def lookup_encoder(extension: str) -> EncoderCapabilities:
    """Return the capabilities of the encoder Pillow uses for `extension`.

    Raises
    ------
    UnsupportedFormatError
        When Pillow has no format registered for the extension, or the format
        can be decoded but not written.
    """

    ext = normalize_extension(extension)
    fmt = Image.registered_extensions().get(f".{ext}") if ext else None
    if fmt is None or fmt.upper() not in Image.SAVE:
        raise UnsupportedFormatError(f"No image encoder registered for extension: {extension!r}")

    fmt = fmt.upper()
    return EncoderCapabilities(
        format=fmt,
        extension=ext,
        supports_quality=fmt in _QUALITY_FORMATS,
        supports_progressive=fmt in _PROGRESSIVE_FORMATS,
    )


def lookup_format(name: str) -> EncoderCapabilities:
    """Like :func:`lookup_encoder` but also accepts Pillow format names (``"JPEG"``)."""

    Image.init()
    fmt = str(name).strip().upper()
    if fmt in Image.SAVE:
        for ext, registered in Image.registered_extensions().items():
            if registered.upper() == fmt:
                return lookup_encoder(ext)
    return lookup_encoder(name)


def _progressive_from_metadata(image: Image.Image, fmt: str) -> Optional[bool]:
    _keyword, info_keys = _PROGRESSIVE_FORMATS[fmt]
    info = getattr(image, "info", None) or {}
    for key in info_keys:
        if key in info:
            return bool(info[key])
    return None


def encoder_params(
    capabilities: EncoderCapabilities,
    image: Image.Image,
    options: WriteOptions,
) -> dict[str, Any]:
    """Translate `options` into ``Image.save`` keyword arguments.

    Axes the encoder does not support are left out entirely, so asking for a
    quality or progressive mode on PNG is not an error.
    """

    params: dict[str, Any] = {}

    if capabilities.supports_quality:
        params["quality"] = int(round(options.quality * 100))

    if capabilities.supports_progressive:
        keyword, _info_keys = _PROGRESSIVE_FORMATS[capabilities.format]
        flag = options.progressive
        if flag is None:
            flag = _progressive_from_metadata(image, capabilities.format)
        if flag is not None:
            params[keyword] = bool(flag)

    return params
