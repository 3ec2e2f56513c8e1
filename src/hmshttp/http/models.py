# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models shared by transport clients."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from ..config import HttpSettings
from ..utils.context import CancelContext

Headers = dict[str, str]


@dataclass
class RetryConfig:
    """Retry policy for one transport call."""

    max_retries: int = 4
    wait_min: float = 1.0
    wait_max: float = 30.0

    @property
    def max_attempts(self) -> int:
        return max(0, self.max_retries) + 1

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> RetryConfig:
        """Build a retry config from the shared HttpSettings."""
        return cls(
            max_retries=max(0, settings.max_retries),
            wait_min=max(0.0, settings.retry_wait_min),
            wait_max=max(0.0, settings.retry_wait_max),
        )

    def merged(self, *, max_retries: int | None = None, max_wait: float | None = None) -> RetryConfig:
        """
        Return a copy with the non-zero overrides applied.

        Zero or None leaves the corresponding default in place; the receiver is never modified.
        """
        changes: dict[str, Any] = {}
        if max_retries:
            changes["max_retries"] = max(0, int(max_retries))
        if max_wait:
            wait_max = max(0.0, float(max_wait))
            changes["wait_max"] = wait_max
            changes["wait_min"] = min(self.wait_min, wait_max)
        return replace(self, **changes) if changes else replace(self)


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    auth: tuple[str, str] | None = None
    retry: RetryConfig | None = None
    cancel: CancelContext | None = None


@dataclass
class HttpResponse:
    """Normalized HTTP response, or the transport failure that prevented one."""

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error: BaseException | None = field(default=None, repr=False)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @classmethod
    def from_exception(cls, exc: BaseException, **meta: Any) -> HttpResponse:
        return cls(
            ok=False,
            error_message=str(exc) or exc.__class__.__name__,
            error_type=exc.__class__.__name__,
            error=exc,
            meta=dict(meta),
        )


@dataclass
class Auth:
    """Basic-auth credentials attached to a request descriptor."""

    username: str
    password: str

    def as_tuple(self) -> tuple[str, str]:
        return (self.username, self.password)

    def __repr__(self) -> str:
        return f"Auth(username={self.username!r}, password='***')"
