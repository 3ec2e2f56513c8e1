# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import Optional

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _exception_chain(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps the socket/ssl failure it hit, so the whole cause chain is
    inspected before settling on the httpx exception type.
    """
    chain = list(_exception_chain(exc))

    for item in chain:
        if isinstance(item, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(item, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ConnectError):
        message = str(exc).lower()
        if "certificate" in message or "ssl" in message or "tls" in message:
            return ErrorCategory.SSL_ERROR
        if "name or service not known" in message or "nodename nor servname" in message:
            return ErrorCategory.DNS_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: Optional[ErrorCategory]) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during request",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error during request",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


class HttpLibError(Exception):
    """Base class for every failure raised by hmshttp."""


class ValidationError(HttpLibError):
    """The request descriptor is incomplete; no network attempt was made."""


class ConfigurationError(HttpLibError):
    """A transport client could not be built or resolved."""


class TransportError(HttpLibError):
    """The network exchange failed (DNS, connect, TLS handshake, timeout)."""

    def __init__(self, message: str, *, cause: BaseException | None = None, category: ErrorCategory | None = None):
        super().__init__(message)
        self.cause = cause
        if category is None:
            category = categorize_exception(cause) if cause is not None else ErrorCategory.UNKNOWN_ERROR
        self.category = category

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)


class CancellationError(HttpLibError):
    """The caller's cancellation context was cancelled or hit its deadline."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class UnexpectedStatusError(HttpLibError):
    """The exchange succeeded but the status code is not an accepted one."""

    def __init__(self, status_code: int, body: bytes, expected: tuple[int, ...] = ()):
        message = f"unexpected HTTP status {status_code}"
        if expected:
            message += f" (expected one of {', '.join(str(code) for code in expected)})"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.expected = expected


class DecodeError(HttpLibError):
    """The response body could not be decoded into the destination type."""

    def __init__(self, message: str, *, body: bytes = b""):
        super().__init__(message)
        self.body = body


__all__ = [
    "CancellationError",
    "ConfigurationError",
    "DecodeError",
    "ErrorCategory",
    "HttpLibError",
    "TransportError",
    "UnexpectedStatusError",
    "ValidationError",
    "categorize_exception",
    "error_category_to_reason",
]
