"""Library configuration for pyhooks."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhooks.exceptions import HooksConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise HooksConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class HooksConfig:
    """Shared defaults for the reactive utilities.

    Parameters
    ----------
    content_type : str
        ``Content-Type`` header sent with every request unless the target
        overrides it.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    debounce_interval : float
        Quiet interval in seconds used by :class:`~pyhooks.debounce.Debouncer`
        when none is given explicitly.
    storage_path : str or None
        Location of the JSON file backing
        :class:`~pyhooks.storage.JsonFileStore`. ``None`` keeps
        persistence in memory.
    trace_requests : bool
        Emit redacted DEBUG logs for every request and response.
    abort_superseded : bool
        Cancel in-flight request tasks as soon as a newer request
        supersedes them. Stale outcomes are discarded either way.
    """

    content_type: str = "application/json"
    request_timeout: float = 30.0
    debounce_interval: float = 0.3
    storage_path: str | None = None
    trace_requests: bool = False
    abort_superseded: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise HooksConfigError("request_timeout must be positive")
        if self.debounce_interval < 0:
            raise HooksConfigError("debounce_interval must be non-negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> HooksConfig:
        """Create configuration from ``PYHOOKS_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        content_type = env.get("PYHOOKS_CONTENT_TYPE")
        if content_type is not None:
            config_kwargs["content_type"] = content_type

        storage_path = env.get("PYHOOKS_STORAGE_PATH")
        if storage_path:
            config_kwargs["storage_path"] = storage_path

        _ENV_FLOAT_MAP = {
            "PYHOOKS_REQUEST_TIMEOUT": "request_timeout",
            "PYHOOKS_DEBOUNCE_INTERVAL": "debounce_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "trace_requests" not in overrides:
            config_kwargs["trace_requests"] = _env_bool(env.get("PYHOOKS_TRACE_REQUESTS"), False)

        if "abort_superseded" not in overrides:
            config_kwargs["abort_superseded"] = _env_bool(env.get("PYHOOKS_ABORT_SUPERSEDED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
