# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry policy for HttpClient implementations, driven by tenacity."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.stop import stop_base

from ..config import load_http_settings
from ..utils.context import CancelContext
from .models import HttpRequest, RetryConfig

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (httpx.TransportError,)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed HttpSettings."""
    return RetryConfig.from_settings(load_http_settings())


def should_retry_status(status_code: int | None) -> bool:
    """Rate limiting and server errors are retried; 501 means it will never work."""
    if status_code is None:
        return False
    if status_code == 429:
        return True
    return 500 <= status_code <= 599 and status_code != 501


class stop_when_done(stop_base):
    """Stop retrying once the cancel context is cancelled or past its deadline."""

    def __init__(self, cancel: CancelContext):
        self._cancel = cancel

    def __call__(self, retry_state: RetryCallState) -> bool:
        return self._cancel.done()


def _return_last_outcome(retry_state: RetryCallState) -> httpx.Response:
    """Hand back the final response (or re-raise the final error) when retries run out."""
    outcome = retry_state.outcome
    if outcome is None:  # pragma: no cover - tenacity always records an outcome
        raise RuntimeError("retry loop finished without an outcome")
    return outcome.result()


def build_retrying(config: RetryConfig, cancel: CancelContext | None = None) -> Retrying:
    """
    Create the tenacity policy for one call.

    - transport exceptions and 429/5xx (except 501) responses are retried
    - exponential backoff between ``wait_min`` and ``wait_max``
    - a cancel context stops the loop and interrupts backoff sleeps
    """
    stop = stop_after_attempt(config.max_attempts)
    sleep: Callable[[float], object] = time.sleep
    if cancel is not None:
        stop = stop | stop_when_done(cancel)
        sleep = cancel.wait

    return Retrying(
        stop=stop,
        wait=wait_exponential(multiplier=config.wait_min, min=config.wait_min, max=config.wait_max),
        retry=(
            retry_if_exception_type(RETRYABLE_EXCEPTIONS)
            | retry_if_result(lambda response: should_retry_status(getattr(response, "status_code", None)))
        ),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        retry_error_callback=_return_last_outcome,
        reraise=True,
    )


def send_with_retries(
    send: Callable[[HttpRequest], httpx.Response],
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> httpx.Response:
    """Execute ``send`` under the retry policy; ``request.retry`` wins over ``retry_config``."""
    cfg = request.retry or retry_config or build_default_retry_config()
    retrying = build_retrying(cfg, request.cancel)
    return retrying(send, request)


__all__ = [
    "RETRYABLE_EXCEPTIONS",
    "build_default_retry_config",
    "build_retrying",
    "send_with_retries",
    "should_retry_status",
    "stop_when_done",
]
