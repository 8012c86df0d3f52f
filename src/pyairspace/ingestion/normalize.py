"""Normalization helpers.

Centralizes defensive parsing of feed values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def normalize_label(value: Any) -> str | None:
    """Strip a searchable label; blank labels are treated as absent."""
    text = safe_str(value)
    if text is None:
        return None
    text = text.strip()
    return text or None
