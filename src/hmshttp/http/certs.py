# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TLS client pair construction from CA bundles and client certificates."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass

import certifi

from ..config import HttpSettings, load_http_settings
from ..errors import ConfigurationError
from .client import HttpClient
from .httpx_client import HttpxClient

logger = logging.getLogger(__name__)


@dataclass
class TLSClientPair:
    """
    Two alternative transports for the same endpoint.

    ``secure_client`` verifies the server against a CA bundle (and may present a
    client certificate); ``insecure_client`` does neither. Either handle may be
    cleared by the caller.
    """

    secure_client: HttpClient | None = None
    insecure_client: HttpClient | None = None

    def close(self) -> None:
        for client in (self.secure_client, self.insecure_client):
            if client is not None:
                client.close()


def create_ssl_context(
    ca_bundle_path: str = "",
    *,
    client_cert: str | None = None,
    client_key: str | None = None,
) -> ssl.SSLContext:
    """
    Build a verifying SSL context.

    An empty ``ca_bundle_path`` falls back to the certifi trust store.
    """
    try:
        ctx = ssl.create_default_context(cafile=ca_bundle_path or certifi.where())
        ctx.check_hostname = True
        ctx.verify_mode = ssl.CERT_REQUIRED
        if client_cert:
            ctx.load_cert_chain(certfile=client_cert, keyfile=client_key)
    except (OSError, ValueError) as exc:
        # ssl.SSLError is an OSError subclass.
        source = ca_bundle_path or "default trust store"
        raise ConfigurationError(f"cannot load TLS material from {source}: {exc}") from exc
    return ctx


def create_client_pair(
    ca_bundle_path: str = "",
    *,
    client_cert: str | None = None,
    client_key: str | None = None,
    settings: HttpSettings | None = None,
) -> TLSClientPair:
    """Build a secure/insecure HttpxClient pair sharing the same settings."""
    settings = settings or load_http_settings()
    ctx = create_ssl_context(ca_bundle_path, client_cert=client_cert, client_key=client_key)
    logger.debug("Created TLS client pair (ca bundle: %s)", ca_bundle_path or "default")
    return TLSClientPair(
        secure_client=HttpxClient(settings, verify=ctx),
        insecure_client=HttpxClient(settings, verify=False),
    )


__all__ = ["TLSClientPair", "create_client_pair", "create_ssl_context"]
