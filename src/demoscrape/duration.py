# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Duration normalization: seconds or restricted ISO-8601 strings to whole seconds."""

from __future__ import annotations

import math
import re
from typing import Any

# Hours/minutes/seconds only. Days, months and years are not accepted.
_ISO_DURATION_RE = re.compile(
    r"P(?:T(?:(\d+(?:\.\d+)?)H)?(?:(\d+(?:\.\d+)?)M)?(?:(\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE | re.ASCII,
)
_NUMERIC_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _positive_seconds(value: float) -> int | None:
    if not math.isfinite(value) or value <= 0:
        return None
    rounded = _round_half_up(value)
    return rounded if rounded > 0 else None


def parse_iso_duration(value: str) -> int | None:
    """``"PT1M30S"`` -> 90. None for anything outside ``P(T(nH)?(nM)?(nS)?)?``."""
    m = _ISO_DURATION_RE.fullmatch(value.strip())
    if m is None:
        return None
    hours, minutes, seconds = (float(g) if g else 0.0 for g in m.groups())
    return _positive_seconds(hours * 3600 + minutes * 60 + seconds)


def normalize_duration(value: Any) -> int | None:
    """Whole positive seconds from a number, numeric string, or ISO string.

    Returns None for anything else; callers treat that as "no candidate",
    never as an error.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return _positive_seconds(float(value))
        except OverflowError:
            return None
    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None
    if _NUMERIC_RE.fullmatch(trimmed):
        return _positive_seconds(float(trimmed))
    return parse_iso_duration(trimmed)
