# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for hmshttp."""

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .version import __version__

DEFAULT_USER_AGENT = f"hmshttp/{__version__}"
DEFAULT_CONTENT_TYPE = "application/json"
ENV_PREFIX = "HMSHTTP_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

T = TypeVar("T")


def parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def env_value(name: str, parse: Callable[[str], T], default: T, *, minimum: Optional[T] = None) -> T:
    """
    Read ``HMSHTTP_<name>`` through ``parse``.

    Unset, blank, unparseable or below-``minimum`` values all yield ``default``
    so a bad variable never stops a request from being sent.
    """
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = parse(raw.strip())
    except ValueError:
        return default
    if minimum is not None and value < minimum:  # type: ignore[operator]
        return default
    return value


@dataclass
class HttpSettings:
    """Transport defaults applied when a request does not override them."""

    timeout: float = 30.0
    max_retries: int = 4
    retry_wait_min: float = 1.0
    retry_wait_max: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            timeout=env_value("HTTP_TIMEOUT", float, cls.timeout, minimum=0.0),
            max_retries=env_value("HTTP_RETRIES", int, cls.max_retries, minimum=0),
            retry_wait_min=env_value("HTTP_RETRY_WAIT_MIN", float, cls.retry_wait_min, minimum=0.0),
            retry_wait_max=env_value("HTTP_RETRY_WAIT_MAX", float, cls.retry_wait_max, minimum=0.0),
            user_agent=env_value("USER_AGENT", str, cls.user_agent),
            allow_redirects=env_value("HTTP_REDIRECTS", parse_bool, cls.allow_redirects),
            verify_ssl=env_value("HTTP_VERIFY_SSL", parse_bool, cls.verify_ssl),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
