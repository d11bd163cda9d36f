from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from pyimgio.errors import InvalidSchemeError


def sanitize_path(path: str | os.PathLike[str]) -> str:
    """Return the canonical ``file://`` URI for a local path.

    Accepts plain paths (relative paths are resolved against the current
    directory and ``~`` is expanded) and ``file:`` URIs on this host. Any
    other scheme raises :class:`InvalidSchemeError`.
    """

    raw = os.fspath(path)
    if not isinstance(raw, str) or not raw:
        raise ValueError(f"path must be a non-empty string, got {path!r}")

    parts = urlsplit(raw)
    scheme = parts.scheme.lower()

    # Single letters are Windows drive names ("C:\\..."), not schemes.
    if len(scheme) > 1:
        if scheme != "file":
            raise InvalidSchemeError("Path must point to a local file.")
        if parts.netloc not in ("", "localhost"):
            raise InvalidSchemeError(f"Path must point to a local file, got host {parts.netloc!r}.")
        local = url2pathname(parts.path)
    else:
        local = os.path.expanduser(raw)

    return Path(os.path.abspath(local)).as_uri()
