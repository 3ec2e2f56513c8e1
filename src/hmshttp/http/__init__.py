# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .certs import TLSClientPair, create_client_pair, create_ssl_context
from .client import (
    HttpClient,
    create_default_http_client,
    get_default_http_client,
    reset_default_http_client,
)
from .decode import acceptance_set, check_status, decode_body
from .executor import ExecutionResult, do_http_action
from .headers import header_value, merge_headers
from .httpx_client import HttpxClient
from .models import Auth, Headers, HttpRequest, HttpResponse, RetryConfig
from .request import (
    HTTPRequest,
    get_body_for_http_request,
    new_ca_http_request,
    new_http_request,
)
from .resolver import ClientSource, ResolvedClient, resolve_client
from .retry import build_default_retry_config, build_retrying, send_with_retries

__all__ = [
    "Auth",
    "ClientSource",
    "ExecutionResult",
    "HTTPRequest",
    "Headers",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "ResolvedClient",
    "RetryConfig",
    "StubHttpClient",
    "TLSClientPair",
    "acceptance_set",
    "build_default_retry_config",
    "build_retrying",
    "check_status",
    "create_client_pair",
    "create_default_http_client",
    "create_ssl_context",
    "decode_body",
    "do_http_action",
    "get_body_for_http_request",
    "get_default_http_client",
    "header_value",
    "merge_headers",
    "new_ca_http_request",
    "new_http_request",
    "reset_default_http_client",
    "resolve_client",
    "send_with_retries",
]
