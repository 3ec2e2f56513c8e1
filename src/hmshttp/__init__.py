# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
hmshttp package entrypoint.

Standardizes an outbound HTTP call: pick a plain or TLS-pair transport, send
with retries and cooperative cancellation, validate the status code and decode
the JSON body. Transports are abstracted behind an injectable client interface
and every failure surfaces as an ``HttpLibError`` subclass.
"""

from .config import HttpSettings, load_http_settings
from .errors import (
    CancellationError,
    ConfigurationError,
    DecodeError,
    ErrorCategory,
    HttpLibError,
    TransportError,
    UnexpectedStatusError,
    ValidationError,
)
from .http import (
    Auth,
    HTTPRequest,
    HttpClient,
    HttpxClient,
    RetryConfig,
    TLSClientPair,
    create_client_pair,
    create_default_http_client,
    do_http_action,
    get_body_for_http_request,
    new_ca_http_request,
    new_http_request,
)
from .log import setup_logging
from .utils.context import CancelContext, request_context
from .version import __version__

__all__ = [
    "Auth",
    "CancelContext",
    "CancellationError",
    "ConfigurationError",
    "DecodeError",
    "ErrorCategory",
    "HTTPRequest",
    "HttpClient",
    "HttpLibError",
    "HttpSettings",
    "HttpxClient",
    "RetryConfig",
    "TLSClientPair",
    "TransportError",
    "UnexpectedStatusError",
    "ValidationError",
    "create_client_pair",
    "create_default_http_client",
    "do_http_action",
    "get_body_for_http_request",
    "load_http_settings",
    "new_ca_http_request",
    "new_http_request",
    "request_context",
    "setup_logging",
    "__version__",
]
