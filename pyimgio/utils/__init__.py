"""Utility helpers for pyimgio."""

from __future__ import annotations

from .optional_deps import optional_import, require
from .param_check import check_number, check_range, check_unit_interval

__all__ = [
    "check_number",
    "check_range",
    "check_unit_interval",
    "optional_import",
    "require",
]
