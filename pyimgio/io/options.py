from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from pyimgio.utils.param_check import check_unit_interval

DEFAULT_QUALITY = 0.8


def _optional_bool(value: Any, *, name: str) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise ValueError(f"{name} must be true, false or null, got {value!r}")


@dataclass(frozen=True)
class WriteOptions:
    """Encoder tunables applied by :func:`pyimgio.io.image.save_image`.

    Parameters
    ----------
    quality:
        Compression quality in ``[0.0, 1.0]``. Only used by encoders that
        support explicit compression control (JPEG, WebP, ...); ignored for
        lossless formats such as PNG.
    progressive:
        ``True`` turns progressive/interlaced output on, ``False`` turns it
        off. ``None`` keeps whatever the source image's metadata says, falling
        back to the encoder default. Ignored by formats without the mode.
    """

    quality: float = DEFAULT_QUALITY
    progressive: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quality", check_unit_interval(self.quality, param_name="quality"))
        object.__setattr__(
            self, "progressive", _optional_bool(self.progressive, name="progressive")
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "WriteOptions":
        if not isinstance(raw, Mapping):
            raise ValueError(f"write options must be a dict/object, got {type(raw).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in raw.keys() if k not in known)
        if unknown:
            raise ValueError(
                f"Unknown write option(s): {', '.join(unknown)}. Supported: {', '.join(sorted(known))}."
            )

        return cls(
            quality=raw.get("quality", DEFAULT_QUALITY),
            progressive=raw.get("progressive", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"quality": self.quality, "progressive": self.progressive}
