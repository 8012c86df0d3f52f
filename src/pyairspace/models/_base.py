"""Base model for pyairspace payloads.

Every snapshot model inherits from :class:`AirspaceBaseModel` which
provides:

* ``alias_generator=to_pascal`` so the feed's PascalCase keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips empty values and Go
  zero timestamps so the field default is used.
* A ``raw`` dict that captures the original payload, so fields the
  models do not declare still pass through to the presentation layer.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal

# Go's zero time.Time, serialized by the feed for unknown schedule times.
_ZERO_TIMESTAMPS = frozenset({"0001-01-01T00:00:00Z"})


class AirspaceBaseModel(BaseModel):
    """Base for snapshot models.

    Handles:
    * PascalCase -> snake_case via ``alias_generator=to_pascal``
    * empty strings, NaN and zero timestamps -> dropped so the field
      default is used instead
    * Stashes the original payload dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_pascal,
    )

    raw: dict[str, Any] = Field(default_factory=dict, alias="raw")
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and (not value.strip() or value in _ZERO_TIMESTAMPS):
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = AirspaceBaseModel._clean_dict(original)
        # Keep an explicitly supplied raw= (construction by keyword).
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
