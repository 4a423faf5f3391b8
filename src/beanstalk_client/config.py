"""Connection settings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlparse

from .logger import LogLevel
from .protocol import DEFAULT_PORT, DEFAULT_TIMEOUT

DEFAULT_HOST = "localhost"
SCHEMES = frozenset({"beanstalk", "tcp"})


def normalize_timeout(value: Any) -> float:
    """Return ``value`` as seconds; unset or unusable values give the default.

    Only finite, positive numbers (or numeric strings) are kept.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_TIMEOUT
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        try:
            seconds = float(value.strip())
        except ValueError:
            return DEFAULT_TIMEOUT
    else:
        return DEFAULT_TIMEOUT
    if not math.isfinite(seconds) or seconds <= 0:
        return DEFAULT_TIMEOUT
    return seconds


@dataclass
class ConnectionOptions:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float | None = None
    logger: object | None = None
    log_level: LogLevel = "info"

    def __post_init__(self) -> None:
        self.port = int(self.port)
        self.timeout = normalize_timeout(self.timeout)

    @classmethod
    def from_url(cls, url: str, **overrides: Any) -> "ConnectionOptions":
        if "://" not in url:
            url = f"beanstalk://{url}"
        parsed = urlparse(url)
        scheme = parsed.scheme or "beanstalk"
        if scheme not in SCHEMES:
            raise ValueError(f"Unsupported scheme: {scheme}")

        params: dict[str, Any] = {
            "host": parsed.hostname or DEFAULT_HOST,
            "port": parsed.port or DEFAULT_PORT,
        }
        timeout = parse_qs(parsed.query).get("timeout")
        if timeout:
            params["timeout"] = timeout[-1]
        params.update(overrides)
        return cls(**params)


__all__ = ["ConnectionOptions", "DEFAULT_HOST", "normalize_timeout"]
