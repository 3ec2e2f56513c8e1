# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cooperative cancellation for outbound requests.

A CancelContext carries an optional deadline and a cancel flag. Each retry
attempt clamps its timeout to whatever time is left and runs through
``CancelContext.call`` so a cancel or deadline unblocks the caller mid-read.

An ambient context can be layered with ``request_context`` so helpers deep in
a call stack pick it up when a descriptor does not carry its own.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import Future, wait
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, TypeVar

from ..errors import CancellationError

T = TypeVar("T")

# How often a blocked call re-checks the context.
POLL_INTERVAL = 0.05


class CancelContext:
    """Thread-safe cancel flag with an optional monotonic deadline."""

    def __init__(self, deadline: float | None = None, parent: CancelContext | None = None):
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline
        self._parent = parent
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float, parent: CancelContext | None = None) -> CancelContext:
        """Context that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + max(0.0, float(seconds)), parent=parent)

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.is_cancelled()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        """True once cancelled or past the deadline."""
        return self.is_cancelled() or self.expired()

    def reason(self) -> str:
        if self.is_cancelled():
            return "context cancelled"
        if self.expired():
            return "context deadline exceeded"
        return ""

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """
        Sleep up to ``seconds``, waking early on cancel or deadline.

        Returns True when the context is done.
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        if seconds > 0:
            # Parent cancellation is only noticed once the slice elapses.
            self._cancelled.wait(seconds)
        return self.done()

    def call(self, fn: Callable[..., T], *args: Any, poll_interval: float = POLL_INTERVAL) -> T:
        """
        Run ``fn(*args)`` on a helper thread and wait for it in short slices.

        Raises CancellationError as soon as the context is cancelled or its
        deadline passes, even while ``fn`` is still blocked. The abandoned helper
        is a daemon thread that ends once ``fn`` returns or hits its own timeout;
        its result is discarded.
        """
        if self.done():
            raise CancellationError(self.reason())

        future: Future[T] = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(fn(*args))
            except BaseException as exc:  # noqa: BLE001 - re-raised by future.result()
                future.set_exception(exc)

        threading.Thread(target=run, name="hmshttp-call", daemon=True).start()

        while True:
            timeout = poll_interval
            remaining = self.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)
            finished, _ = wait([future], timeout=timeout)
            if finished:
                return future.result()
            if self.done():
                raise CancellationError(self.reason())

    def __repr__(self) -> str:
        return f"CancelContext(deadline={self.deadline!r}, done={self.done()})"


_current_request_context: ContextVar[CancelContext | None] = ContextVar("hmshttp_request_context", default=None)


def get_request_context() -> CancelContext | None:
    """Return the ambient cancel context, if one is active."""
    return _current_request_context.get()


@contextmanager
def request_context(
    context: CancelContext | None = None,
    *,
    timeout: float | None = None,
) -> Iterator[CancelContext]:
    """
    Layer a cancel context onto the ambient one for the duration of the block.

    When ``timeout`` is given a child context is derived from ``context`` (or the
    current ambient context) so inner deadlines can only shorten outer ones.
    """
    parent = context or get_request_context()
    if timeout is not None:
        current = CancelContext.with_timeout(timeout, parent=parent)
    else:
        current = parent or CancelContext()
    token = _current_request_context.set(current)
    try:
        yield current
    finally:
        _current_request_context.reset(token)


__all__ = [
    "CancelContext",
    "get_request_context",
    "request_context",
]
