"""Tracker configuration for pyairspace."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyairspace._constants import (
    DEFAULT_HEATMAP_DURATION,
    DEFAULT_HEATMAP_INTERVAL_MILLIS,
    DEFAULT_HEATMAP_NAME,
    DEFAULT_POLL_BUDGET,
    DEFAULT_POLL_INTERVAL_MILLIS,
    DEFAULT_POLL_NAME,
    DEFAULT_REQUEST_TIMEOUT,
    HEATMAP_URL,
    SNAPSHOT_KEY,
)
from pyairspace.exceptions import AirspaceConfigError

_UNBOUNDED = {"", "none", "unbounded", "inf"}


def _env_budget(value: str) -> int | None:
    normalized = value.strip().lower()
    if normalized in _UNBOUNDED:
        return None
    return int(normalized)


@dataclasses.dataclass(frozen=True)
class AirspaceConfig:
    """Tracker configuration.

    Parameters
    ----------
    url : str
        Snapshot endpoint returning ``{"Aircraft": {icao24: {...}}}``.
    interval_millis : int
        Pause between the end of one poll cycle and the start of the next.
    budget : int or None
        Maximum number of executed poll cycles before the poller stops
        itself. ``None`` polls until stopped.
    name : str
        Name of the aircraft poll task.
    snapshot_key : str
        Top-level key holding the id -> attributes mapping.
    heatmap_url : str
        Complaint heatmap endpoint.
    heatmap_duration : str
        Lookback window sent as ``?d=`` (e.g. ``"15m"``, ``"2h"``).
    heatmap_interval_millis : int
        Heatmap refresh cadence.
    heatmap_name : str
        Name of the heatmap poll task.
    request_timeout : float
        Total per-request timeout in seconds.
    """

    url: str
    interval_millis: int = DEFAULT_POLL_INTERVAL_MILLIS
    budget: int | None = DEFAULT_POLL_BUDGET
    name: str = DEFAULT_POLL_NAME
    snapshot_key: str = SNAPSHOT_KEY
    heatmap_url: str = HEATMAP_URL
    heatmap_duration: str = DEFAULT_HEATMAP_DURATION
    heatmap_interval_millis: int = DEFAULT_HEATMAP_INTERVAL_MILLIS
    heatmap_name: str = DEFAULT_HEATMAP_NAME
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not self.url:
            raise AirspaceConfigError("url must be non-empty")
        if not self.name or not self.heatmap_name:
            raise AirspaceConfigError("poll task names must be non-empty")
        if self.name == self.heatmap_name:
            raise AirspaceConfigError(f"aircraft and heatmap pollers share the name {self.name!r}")
        if self.interval_millis <= 0 or self.heatmap_interval_millis <= 0:
            raise AirspaceConfigError("poll intervals must be positive")
        if self.budget is not None and self.budget <= 0:
            raise AirspaceConfigError(f"budget must be positive or None, got {self.budget}")
        if self.request_timeout <= 0:
            raise AirspaceConfigError("request_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> AirspaceConfig:
        """Create configuration from environment variables.

        Reads ``PYAIRSPACE_URL`` and the optional ``PYAIRSPACE_*``
        variables below. Explicit keyword arguments override environment
        values.

        Returns
        -------
        AirspaceConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "PYAIRSPACE_URL": "url",
            "PYAIRSPACE_NAME": "name",
            "PYAIRSPACE_SNAPSHOT_KEY": "snapshot_key",
            "PYAIRSPACE_HEATMAP_URL": "heatmap_url",
            "PYAIRSPACE_HEATMAP_DURATION": "heatmap_duration",
            "PYAIRSPACE_HEATMAP_NAME": "heatmap_name",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            interval_env = env.get("PYAIRSPACE_INTERVAL_MILLIS")
            if interval_env is not None:
                config_kwargs["interval_millis"] = int(interval_env)

            heatmap_interval_env = env.get("PYAIRSPACE_HEATMAP_INTERVAL_MILLIS")
            if heatmap_interval_env is not None:
                config_kwargs["heatmap_interval_millis"] = int(heatmap_interval_env)

            budget_env = env.get("PYAIRSPACE_BUDGET")
            if budget_env is not None:
                config_kwargs["budget"] = _env_budget(budget_env)

            timeout_env = env.get("PYAIRSPACE_REQUEST_TIMEOUT")
            if timeout_env is not None:
                config_kwargs["request_timeout"] = float(timeout_env)
        except ValueError as exc:
            raise AirspaceConfigError(f"Invalid numeric PYAIRSPACE_* value: {exc}") from exc

        config_kwargs.update(overrides)
        if "url" not in config_kwargs:
            raise AirspaceConfigError("PYAIRSPACE_URL is not set")

        return cls(**config_kwargs)
