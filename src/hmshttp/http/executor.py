# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Execute a request descriptor through its resolved transport client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import CancellationError, ConfigurationError, TransportError, ValidationError
from ..utils.context import CancelContext, get_request_context
from .client import HttpClient
from .headers import merge_headers
from .models import HttpRequest, RetryConfig
from .resolver import ClientSource, resolve_client

if TYPE_CHECKING:
    from .request import HTTPRequest

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    status_code: int
    body: bytes


def _effective_timeout(timeout: float, cancel: CancelContext | None) -> float | None:
    effective = timeout if timeout and timeout > 0 else None
    remaining = cancel.remaining() if cancel is not None else None
    if remaining is not None:
        effective = remaining if effective is None else min(effective, remaining)
    return effective


def _retry_override(descriptor: HTTPRequest, client: HttpClient) -> RetryConfig | None:
    if not descriptor.max_retry_count and not descriptor.max_retry_wait:
        return None
    base = client.retry_config or RetryConfig()
    return base.merged(max_retries=descriptor.max_retry_count, max_wait=descriptor.max_retry_wait)


def build_transport_request(descriptor: HTTPRequest, client: HttpClient, cancel: CancelContext | None) -> HttpRequest:
    """Translate a descriptor into the HttpRequest handed to the transport."""
    return HttpRequest(
        url=descriptor.full_url,
        method=(descriptor.method or "GET").upper(),
        headers=merge_headers(descriptor.content_type, descriptor.custom_headers),
        body=bytes(descriptor.payload) if descriptor.payload is not None else b"",
        timeout=_effective_timeout(descriptor.timeout, cancel),
        auth=descriptor.auth.as_tuple() if descriptor.auth is not None else None,
        retry=_retry_override(descriptor, client),
        cancel=cancel,
    )


def do_http_action(descriptor: HTTPRequest) -> ExecutionResult:
    """
    Perform the descriptor's HTTP call and return its raw status and body.

    Raises:
        ValidationError: the descriptor has no URL.
        ConfigurationError: no transport client could be resolved.
        CancellationError: the cancel context finished before or during the call.
        TransportError: the exchange itself failed.
    """
    if not descriptor.full_url:
        raise ValidationError("request has no URL")

    resolved = resolve_client(descriptor)
    if resolved.source is ClientSource.NONE or resolved.client is None:
        raise ConfigurationError("no HTTP client available for request")

    cancel = descriptor.context or get_request_context()
    if cancel is not None and cancel.done():
        raise CancellationError(f"request not sent: {cancel.reason()}")

    transport_request = build_transport_request(descriptor, resolved.client, cancel)
    logger.debug("Executing %s via %s client", descriptor, resolved.source.value)
    response = resolved.client.request(transport_request)

    if not response.ok or response.status_code is None:
        cause = response.error
        if isinstance(cause, CancellationError):
            raise cause
        if cancel is not None and cancel.done():
            raise CancellationError(f"request interrupted: {cancel.reason()}", cause=cause) from cause
        message = response.error_message or "transport failure"
        raise TransportError(f"{transport_request.method} {transport_request.url} failed: {message}", cause=cause) from cause

    return ExecutionResult(status_code=response.status_code, body=response.content)


__all__ = ["ExecutionResult", "build_transport_request", "do_http_action"]
