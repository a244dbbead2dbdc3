from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
# Matches the dashboard refresh rate.
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_WATCH_TIMEOUT = 60.0
DEFAULT_REQUEST_TIMEOUT = 10.0

_BASE_URL_ENV = "API_BASE_URL"
_POLL_INTERVAL_ENV = "CLI_POLL_INTERVAL"
_WATCH_TIMEOUT_ENV = "CLI_POLL_TIMEOUT"
_REQUEST_TIMEOUT_ENV = "CLI_REQUEST_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    watch_timeout: float = DEFAULT_WATCH_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, ignoring unusable values."""
    candidate = (os.getenv(name) or "").strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_config(
    base_url: Optional[str] = None,
    poll_interval: Optional[float] = None,
    watch_timeout: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if poll_interval is None:
        poll_interval = _env_float(_POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL)
    if watch_timeout is None:
        watch_timeout = _env_float(_WATCH_TIMEOUT_ENV, DEFAULT_WATCH_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/"),
        poll_interval=poll_interval,
        watch_timeout=watch_timeout,
        request_timeout=_env_float(_REQUEST_TIMEOUT_ENV, DEFAULT_REQUEST_TIMEOUT),
    )
