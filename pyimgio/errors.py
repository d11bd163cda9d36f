"""Exceptions raised by `pyimgio`.

Plain I/O failures while writing (permission denied, missing parent
directory, disk full) are not wrapped; they propagate as the builtin
`OSError` subclasses.
"""

from __future__ import annotations


class ImageIOError(Exception):
    """Base class for errors raised by `pyimgio`."""


class DecodeError(ImageIOError):
    """A resource could not be opened or its bytes are not a known image format."""


class UnsupportedFormatError(ImageIOError, ValueError):
    """No encoder is registered for the requested file extension."""


class InvalidSchemeError(ImageIOError, ValueError):
    """A path carries a URI scheme that does not point to a local file."""


__all__ = [
    "DecodeError",
    "ImageIOError",
    "InvalidSchemeError",
    "UnsupportedFormatError",
]
