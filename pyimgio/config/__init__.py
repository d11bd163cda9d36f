from __future__ import annotations

from .io import load_config, load_write_options

__all__ = ["load_config", "load_write_options"]
