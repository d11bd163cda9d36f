from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from pyimgio.io.options import WriteOptions
from pyimgio.utils.optional_deps import require


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a config file into a Python dict.

    Supported formats:
    - JSON (.json) always
    - YAML (.yml/.yaml) only when PyYAML is installed
    """

    config_path = Path(path)
    suffix = str(config_path.suffix).lower()

    if suffix == ".json":
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    elif suffix in (".yml", ".yaml"):
        yaml = require("yaml", extra="yaml", purpose="YAML config files")
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(
            f"Unsupported config extension: {suffix!r} for {str(config_path)!r}. "
            "Supported: .json, .yml, .yaml."
        )

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(
            "Config must be an object/dict at the top level, "
            f"got {type(data).__name__} from {str(config_path)!r}."
        )

    return dict(data)


def load_write_options(source: str | Path | Mapping[str, Any]) -> WriteOptions:
    """Build :class:`WriteOptions` from a config file or an already-loaded mapping.

    The options may sit at the top level (``{"quality": 0.9}``) or under a
    ``"write"`` key (``{"write": {"quality": 0.9}}``).
    """

    data = source if isinstance(source, Mapping) else load_config(source)
    section = data.get("write", data)
    if section is None:
        return WriteOptions()
    return WriteOptions.from_dict(section)
