"""pyimgio - load, copy and save raster images with tunable encoders.

Keep top-level imports lightweight: the numpy bridge and YAML/HTTP support
pull in optional or heavier deps, so exports are lazy-loaded on demand.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Modules
    "config",
    "errors",
    "inputs",
    "io",
    "utils",
    # Image I/O
    "WriteOptions",
    "coerce_image",
    "copy_image",
    "encode_image",
    "load_image",
    "parse_extension",
    "sanitize_path",
    "save_image",
    # Errors
    "DecodeError",
    "ImageIOError",
    "InvalidSchemeError",
    "UnsupportedFormatError",
]


_LAZY_SUBMODULES = {
    "config",
    "errors",
    "inputs",
    "io",
    "utils",
}

_LAZY_EXPORTS = {
    # Image I/O
    "WriteOptions": ("io.options", "WriteOptions"),
    "coerce_image": ("io.image", "coerce_image"),
    "copy_image": ("io.image", "copy_image"),
    "encode_image": ("io.image", "encode_image"),
    "load_image": ("io.image", "load_image"),
    "parse_extension": ("io.image", "parse_extension"),
    "sanitize_path": ("io.paths", "sanitize_path"),
    "save_image": ("io.image", "save_image"),
    # Errors
    "DecodeError": ("errors", "DecodeError"),
    "ImageIOError": ("errors", "ImageIOError"),
    "InvalidSchemeError": ("errors", "InvalidSchemeError"),
    "UnsupportedFormatError": ("errors", "UnsupportedFormatError"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    if name in _LAZY_SUBMODULES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover - tooling convenience
    return sorted(set(globals()) | set(__all__))
