# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import time

import httpx
import pytest

from hmshttp.config import HttpSettings
from hmshttp.http.adapters import StubHttpClient
from hmshttp.http.httpx_client import HttpxClient
from hmshttp.http.models import Auth, HttpRequest, HttpResponse, RetryConfig
from hmshttp.http.retry import (
    build_default_retry_config,
    build_retrying,
    send_with_retries,
    should_retry_status,
)
from hmshttp.utils.context import CancelContext


class SequenceSender:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = 0

    def __call__(self, request: HttpRequest) -> httpx.Response:  # noqa: ARG002
        self.calls += 1
        outcome = self._outcomes[min(self.calls - 1, len(self._outcomes) - 1)]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


NO_WAIT = RetryConfig(max_retries=3, wait_min=0, wait_max=0)


def test_retry_config_from_settings_clamps_minimum():
    settings = HttpSettings(max_retries=-3, retry_wait_min=-1.0)
    retry = RetryConfig.from_settings(settings)
    assert retry.max_retries == 0
    assert retry.max_attempts == 1
    assert retry.wait_min == 0.0
    assert retry.wait_max == settings.retry_wait_max


def test_retry_config_merged_leaves_receiver_untouched():
    base = RetryConfig(max_retries=4, wait_min=1.0, wait_max=30.0)
    merged = base.merged(max_retries=2, max_wait=0.5)
    assert merged.max_retries == 2
    assert merged.wait_max == 0.5
    assert merged.wait_min == 0.5
    assert base == RetryConfig(max_retries=4, wait_min=1.0, wait_max=30.0)

    unchanged = base.merged(max_retries=0, max_wait=0)
    assert unchanged == base
    assert unchanged is not base


@pytest.mark.parametrize(
    "status,expected",
    [(None, False), (200, False), (404, False), (429, True), (500, True), (501, False), (503, True), (599, True)],
)
def test_should_retry_status(status, expected):
    assert should_retry_status(status) is expected


def test_send_with_retries_success_after_retry():
    sender = SequenceSender([httpx.ConnectError("refused"), httpx.Response(200, content=b"{}")])
    result = send_with_retries(sender, HttpRequest(url="http://example"), retry_config=NO_WAIT)
    assert result.status_code == 200
    assert sender.calls == 2


def test_send_with_retries_honors_max_attempts():
    sender = SequenceSender([httpx.ConnectError("refused")])
    with pytest.raises(httpx.ConnectError):
        send_with_retries(sender, HttpRequest(url="http://example"), retry_config=RetryConfig(max_retries=1, wait_min=0, wait_max=0))
    assert sender.calls == 2


def test_send_with_retries_returns_last_retryable_response():
    sender = SequenceSender([httpx.Response(503)])
    result = send_with_retries(sender, HttpRequest(url="http://example"), retry_config=NO_WAIT)
    assert result.status_code == 503
    assert sender.calls == NO_WAIT.max_attempts


def test_send_with_retries_does_not_retry_client_errors():
    sender = SequenceSender([httpx.Response(404), httpx.Response(200)])
    result = send_with_retries(sender, HttpRequest(url="http://example"), retry_config=NO_WAIT)
    assert result.status_code == 404
    assert sender.calls == 1


def test_send_with_retries_propagates_unexpected_exceptions():
    sender = SequenceSender([ValueError("bad"), httpx.Response(200)])
    with pytest.raises(ValueError):
        send_with_retries(sender, HttpRequest(url="http://example"), retry_config=NO_WAIT)
    assert sender.calls == 1


def test_send_with_retries_prefers_request_override():
    sender = SequenceSender([httpx.Response(500)])
    request = HttpRequest(url="http://example", retry=RetryConfig(max_retries=0, wait_min=0, wait_max=0))
    send_with_retries(sender, request, retry_config=NO_WAIT)
    assert sender.calls == 1


def test_send_with_retries_stops_once_cancelled():
    cancel = CancelContext()

    def sender(request):  # noqa: ARG001
        cancel.cancel()
        raise httpx.ConnectError("refused")

    with pytest.raises(httpx.ConnectError):
        send_with_retries(sender, HttpRequest(url="http://example", cancel=cancel), retry_config=NO_WAIT)


def test_build_retrying_sleeps_on_cancel_context():
    cancel = CancelContext()
    retrying = build_retrying(NO_WAIT, cancel)
    assert retrying.sleep == cancel.wait
    assert build_retrying(NO_WAIT).sleep is time.sleep


def test_build_default_retry_config_reads_env(monkeypatch):
    monkeypatch.setenv("HMSHTTP_HTTP_RETRIES", "7")
    cfg = build_default_retry_config()
    assert cfg.max_retries == 7
    assert cfg.max_attempts == 8


def _mock_httpx_client(handler, **settings_overrides) -> HttpxClient:
    settings = HttpSettings(retry_wait_min=0, retry_wait_max=0, **settings_overrides)
    return HttpxClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_httpx_client_success_and_defaults():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, headers={"X-Reply": "1"}, content=b'{"ok": true}')

    client = _mock_httpx_client(handler, user_agent="UA/1.0")
    resp = client.request(
        HttpRequest(
            url="http://example/path",
            method="POST",
            headers={"X": "1"},
            body=b"payload",
            auth=Auth("Groot", "Baz").as_tuple(),
        )
    )
    assert resp.ok is True
    assert resp.status_code == 201
    assert resp.headers["x-reply"] == "1"
    assert resp.content == b'{"ok": true}'
    assert resp.meta["attempts"] == 1
    assert seen[0].headers["User-Agent"] == "UA/1.0"
    assert seen[0].headers["X"] == "1"
    assert seen[0].headers["Authorization"].startswith("Basic ")
    assert seen[0].content == b"payload"


def test_httpx_client_keeps_caller_user_agent():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    client = _mock_httpx_client(handler, user_agent="UA/1.0")
    client.request(HttpRequest(url="http://example", headers={"user-agent": "Mine/2.0"}))
    assert seen[0].headers["User-Agent"] == "Mine/2.0"


def test_httpx_client_converts_transport_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectTimeout("boom", request=request)

    client = _mock_httpx_client(handler, max_retries=2)
    resp = client.request(HttpRequest(url="http://example"))
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.error_message == "boom"
    assert resp.error_type == "ConnectTimeout"
    assert isinstance(resp.error, httpx.ConnectTimeout)
    assert resp.meta["attempts"] == 3
    assert len(calls) == 3


def test_httpx_client_uses_its_own_retry_config_without_override():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    client = _mock_httpx_client(handler, max_retries=1)
    resp = client.request(HttpRequest(url="http://example"))
    assert resp.ok is True
    assert resp.status_code == 502
    assert len(calls) == 2


def test_stub_http_client_returns_registered_responses():
    stub = StubHttpClient()
    custom_resp = HttpResponse(ok=True, status_code=200, content=b"hello")
    stub.add("http://example", custom_resp)
    result = stub.request(HttpRequest(url="http://example"))
    assert result.text == "hello"
    missing = stub.request(HttpRequest(url="http://missing"))
    assert missing.ok is False
    assert stub.requests[0].url == "http://example"
    stub.close()
    assert stub.closed is True
