# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed retrying HttpClient implementation."""

from __future__ import annotations

import ssl

import httpx

from ..config import HttpSettings, load_http_settings
from .client import HttpClient
from .headers import header_value
from .models import HttpRequest, HttpResponse, RetryConfig
from .retry import send_with_retries


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper with a tenacity retry loop.

    The wrapped ``httpx.Client`` owns the connection pool and may be shared by
    many concurrent calls; per-call retry and timeout overrides travel on the
    HttpRequest and never touch this object's state.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        *,
        verify: ssl.SSLContext | bool | None = None,
        retry_config: RetryConfig | None = None,
    ):
        self.settings = settings or load_http_settings()
        self.retry_config = retry_config or RetryConfig.from_settings(self.settings)
        self.verify = self.settings.verify_ssl if verify is None else verify
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.verify,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        if not header_value(headers, "User-Agent"):
            headers["User-Agent"] = self.settings.user_agent

        timeout = request.timeout
        if timeout is None:
            timeout = self.settings.timeout

        attempts = 0

        def exchange(req: HttpRequest, attempt_timeout: float | None) -> httpx.Response:
            return self._client.request(
                req.method,
                req.url,
                headers=headers,
                content=req.body,
                timeout=attempt_timeout,
                follow_redirects=req.allow_redirects,
                auth=req.auth,
            )

        def send_once(req: HttpRequest) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            cancel = req.cancel
            if cancel is None:
                return exchange(req, timeout)
            # Each attempt only gets what is left of the deadline.
            attempt_timeout = timeout
            remaining = cancel.remaining()
            if remaining is not None:
                attempt_timeout = remaining if attempt_timeout is None else min(attempt_timeout, remaining)
            return cancel.call(exchange, req, attempt_timeout)

        try:
            resp = send_with_retries(send_once, request, retry_config=self.retry_config)
        except Exception as exc:  # noqa: BLE001
            return HttpResponse.from_exception(exc, attempts=attempts)

        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            content=resp.content,
            url=str(resp.url),
            meta={"attempts": attempts},
        )

    def close(self) -> None:
        self._client.close()
