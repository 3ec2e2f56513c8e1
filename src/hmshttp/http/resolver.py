# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Transport client selection for a request descriptor.

Precedence, highest first:

1. TLS client pair: its secure client, or its insecure client when the secure
   handle has been cleared (a deliberate downgrade, not an error)
2. the descriptor's explicit client
3. the descriptor's default client factory

Anything else resolves to ``ClientSource.NONE`` and the executor refuses it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .client import HttpClient

if TYPE_CHECKING:
    from .request import HTTPRequest


class ClientSource(str, Enum):
    TLS_SECURE = "tls_secure"
    TLS_INSECURE = "tls_insecure"
    EXPLICIT = "explicit"
    DEFAULT = "default"
    NONE = "none"


@dataclass(frozen=True)
class ResolvedClient:
    source: ClientSource
    client: HttpClient | None


def resolve_client(descriptor: HTTPRequest) -> ResolvedClient:
    pair = descriptor.tls_client_pair
    if pair is not None:
        if pair.secure_client is not None:
            return ResolvedClient(ClientSource.TLS_SECURE, pair.secure_client)
        if pair.insecure_client is not None:
            return ResolvedClient(ClientSource.TLS_INSECURE, pair.insecure_client)
        return ResolvedClient(ClientSource.NONE, None)

    if descriptor.client is not None:
        return ResolvedClient(ClientSource.EXPLICIT, descriptor.client)

    if descriptor.default_client_factory is not None:
        return ResolvedClient(ClientSource.DEFAULT, descriptor.default_client_factory())

    return ResolvedClient(ClientSource.NONE, None)


__all__ = ["ClientSource", "ResolvedClient", "resolve_client"]
