# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reusable request descriptor and its execution entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULT_CONTENT_TYPE, HttpSettings
from ..utils.context import CancelContext
from .certs import TLSClientPair, create_client_pair
from .client import HttpClient, get_default_http_client
from .decode import Destination, check_status, decode_body
from .executor import ExecutionResult, do_http_action
from .models import Auth


@dataclass
class HTTPRequest:
    """
    Everything needed for one logical outbound call.

    Descriptors are mutable and may be re-sent any number of times. They only
    reference their clients; closing those is up to whoever created them.
    Times (``timeout``, ``max_retry_wait``) are in seconds, and zero means
    "use the transport default".
    """

    full_url: str = ""
    method: str = "GET"
    payload: bytes | None = None
    content_type: str = DEFAULT_CONTENT_TYPE
    custom_headers: dict[str, str] = field(default_factory=dict)
    auth: Auth | None = None
    expected_status_codes: list[int] = field(default_factory=list)
    max_retry_count: int = 0
    max_retry_wait: float = 0
    timeout: float = 0
    context: CancelContext | None = None
    client: HttpClient | None = None
    tls_client_pair: TLSClientPair | None = None
    default_client_factory: Callable[[], HttpClient] | None = None

    @classmethod
    def new(cls, url: str) -> HTTPRequest:
        """Descriptor for ``url`` using the shared default client."""
        return cls(full_url=url, client=get_default_http_client())

    @classmethod
    def new_ca(
        cls,
        url: str,
        ca_bundle_path: str = "",
        *,
        client_cert: str | None = None,
        client_key: str | None = None,
        settings: HttpSettings | None = None,
    ) -> HTTPRequest:
        """
        Descriptor for ``url`` with a TLS client pair attached.

        Raises ConfigurationError when the CA bundle or client certificate
        cannot be loaded.
        """
        pair = create_client_pair(
            ca_bundle_path,
            client_cert=client_cert,
            client_key=client_key,
            settings=settings,
        )
        return cls(full_url=url, tls_client_pair=pair)

    def do_http_action(self) -> ExecutionResult:
        return do_http_action(self)

    def get_body_for_http_request(self, destination: Destination = None) -> Any:
        return get_body_for_http_request(self, destination)

    def __str__(self) -> str:
        payload = f"{len(self.payload)} bytes" if self.payload is not None else "none"
        return f"HTTPRequest(url={self.full_url!r}, method={self.method!r}, payload={payload})"


def new_http_request(url: str) -> HTTPRequest:
    return HTTPRequest.new(url)


def new_ca_http_request(url: str, ca_bundle_path: str = "") -> HTTPRequest:
    return HTTPRequest.new_ca(url, ca_bundle_path)


def get_body_for_http_request(descriptor: HTTPRequest, destination: Destination = None) -> Any:
    """
    Send ``descriptor`` and decode its JSON response into ``destination``.

    ``destination`` may be None (plain JSON value), a dataclass, a pydantic-style
    model exposing ``model_validate``, a JSON builtin type, or any callable.

    Raises:
        UnexpectedStatusError: the status is not in ``expected_status_codes`` (or 200).
        DecodeError: the body is empty or does not fit ``destination``.
        plus everything ``do_http_action`` raises.
    """
    result = do_http_action(descriptor)
    check_status(result.status_code, result.body, descriptor.expected_status_codes)
    return decode_body(result.body, destination)


__all__ = [
    "HTTPRequest",
    "get_body_for_http_request",
    "new_ca_http_request",
    "new_http_request",
]
