from __future__ import annotations

import dataclasses
import io
import logging
import os
from pathlib import Path
from typing import IO, Any, Union
from urllib.parse import ParseResult, SplitResult, urlsplit
from urllib.request import url2pathname, urlopen

from PIL import Image

from pyimgio.errors import DecodeError
from pyimgio.io.encoders import encoder_params, lookup_encoder, lookup_format
from pyimgio.io.options import WriteOptions
from pyimgio.utils.optional_deps import require
from pyimgio.utils.param_check import check_range

logger = logging.getLogger(__name__)

ImageResource = Union[str, "os.PathLike[str]", IO[bytes], ParseResult, SplitResult, Image.Image]

URL_SCHEMES = ("http", "https", "ftp", "file")
DEFAULT_TIMEOUT = 30.0


def parse_extension(path: str | os.PathLike[str]) -> str:
    """Return the last dot-delimited segment of `path` (``"a.b.png"`` -> ``"png"``)."""

    return os.fspath(path).rsplit(".", 1)[-1]


def _is_url(value: str) -> bool:
    return urlsplit(value).scheme.lower() in URL_SCHEMES


def _decode(fp: Any, *, source: str) -> Image.Image:
    try:
        with Image.open(fp) as opened:
            opened.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Unable to decode image from {source}: {exc}") from exc

    logger.debug("Decoded %s image %sx%s (%s) from %s", opened.format, *opened.size, opened.mode, source)
    return opened


def _file_url_to_path(parts: SplitResult) -> Path:
    if parts.netloc not in ("", "localhost"):
        raise DecodeError(f"file URL does not point to this host: {parts.geturl()}")
    return Path(url2pathname(parts.path))


def _fetch(url: str, *, timeout: float) -> bytes:
    scheme = urlsplit(url).scheme.lower()
    if scheme in ("http", "https"):
        requests = require("requests", extra="http", purpose="fetching images over HTTP")
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DecodeError(f"Unable to fetch image from {url}: {exc}") from exc
        return response.content

    try:
        with urlopen(url, timeout=timeout) as response:
            return response.read()
    except OSError as exc:
        raise DecodeError(f"Unable to fetch image from {url}: {exc}") from exc


def _load_url(parts: SplitResult, *, timeout: float) -> Image.Image:
    if parts.scheme.lower() == "file":
        path = _file_url_to_path(parts)
        return _decode(path, source=str(path))

    url = parts.geturl()
    logger.debug("Fetching image from %s", url)
    return _decode(io.BytesIO(_fetch(url, timeout=timeout)), source=url)


def load_image(resource: ImageResource, *, timeout: float = DEFAULT_TIMEOUT) -> Image.Image:
    """Coerce an image resource into a fully decoded Pillow image.

    Parameters
    ----------
    resource:
        One of:

        - a local path (``str`` or ``os.PathLike``)
        - a binary file handle (anything with ``read``); left open
        - a URL: a ``str`` with an ``http``/``https``/``ftp``/``file`` scheme,
          or a parsed ``urllib.parse`` result
        - a ``PIL.Image.Image``, returned as-is without decoding
    timeout:
        Seconds to wait for remote URLs.

    Raises
    ------
    DecodeError
        The resource cannot be opened or fetched, or is not a known image format.
    TypeError
        `resource` is none of the above.
    """

    if isinstance(resource, Image.Image):
        return resource

    if isinstance(resource, (ParseResult, SplitResult)):
        if resource.scheme.lower() not in URL_SCHEMES:
            raise DecodeError(f"Unsupported URL scheme: {resource.scheme!r}")
        timeout = check_range(timeout, 0.0, param_name="timeout", include_low=False)
        return _load_url(urlsplit(resource.geturl()), timeout=timeout)

    if isinstance(resource, str) and _is_url(resource):
        timeout = check_range(timeout, 0.0, param_name="timeout", include_low=False)
        return _load_url(urlsplit(resource), timeout=timeout)

    if isinstance(resource, (str, os.PathLike)):
        path = Path(resource).expanduser()
        return _decode(path, source=str(path))

    if hasattr(resource, "read"):
        return _decode(resource, source=getattr(resource, "name", repr(resource)))

    raise TypeError(
        "Expected a path, file handle, URL or PIL.Image.Image, "
        f"got {type(resource).__name__}"
    )


coerce_image = load_image


def _require_image(image: Any) -> Image.Image:
    if not isinstance(image, Image.Image):
        raise TypeError(f"Expected PIL.Image.Image, got {type(image).__name__}")
    return image


def copy_image(image: Image.Image) -> Image.Image:
    """Make a deep copy of `image`.

    The copy has the same size, mode and palette but its own pixel buffer;
    writing pixels into either image never shows up in the other. Crops of a
    larger image copy only the cropped region.
    """

    return _require_image(image).copy()


def _resolve_options(options: WriteOptions | None, overrides: dict[str, Any]) -> WriteOptions:
    if options is None:
        options = WriteOptions()
    elif not isinstance(options, WriteOptions):
        raise TypeError(f"options must be WriteOptions or None, got {type(options).__name__}")

    unknown = sorted(set(overrides) - {"quality", "progressive"})
    if unknown:
        raise TypeError(f"Unexpected write option(s): {', '.join(unknown)}")
    return dataclasses.replace(options, **overrides) if overrides else options


def save_image(
    image: Image.Image,
    path: str | os.PathLike[str],
    options: WriteOptions | None = None,
    **overrides: Any,
) -> str:
    """Store an image on disk, picking the encoder from the path's extension.

    Accepts a :class:`WriteOptions` and/or ``quality=`` / ``progressive=``
    keyword overrides:

    - ``quality``: float in ``[0.0, 1.0]``, default ``0.8``. Only applied when
      the format supports compression control.
    - ``progressive``: ``True``/``False`` switches progressive (JPEG) or
      interlaced (GIF) output on/off. Defaults to copying the flag from the
      image's metadata.

    Examples::

        save_image(image, "/path/to/new/image.jpg", quality=1.0)
        save_image(image, "/path/to/new/image.jpg", progressive=False)

    Returns the path to the saved image. Nothing is cleaned up if encoding
    fails half-way; the destination may be left truncated.
    """

    _require_image(image)
    opts = _resolve_options(options, overrides)
    destination = os.fspath(path)
    capabilities = lookup_encoder(parse_extension(destination))
    params = encoder_params(capabilities, image, opts)

    logger.debug("Encoding %s -> %s with %s", capabilities.format, destination, params)
    with open(destination, "wb") as fp:
        image.save(fp, format=capabilities.format, **params)
    return destination


def encode_image(
    image: Image.Image,
    format: str,
    options: WriteOptions | None = None,
    **overrides: Any,
) -> bytes:
    """Encode `image` in memory; `format` is an extension (``"jpg"``) or Pillow name (``"JPEG"``)."""

    _require_image(image)
    opts = _resolve_options(options, overrides)
    capabilities = lookup_format(format)
    params = encoder_params(capabilities, image, opts)

    buffer = io.BytesIO()
    image.save(buffer, format=capabilities.format, **params)
    return buffer.getvalue()
