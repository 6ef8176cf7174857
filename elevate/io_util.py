"""Helpers for retrying interrupted system calls."""

from __future__ import annotations

from typing import Callable, TypeVar

T = TypeVar("T")


def was_interrupted(err: BaseException) -> bool:
    """Return whether ``err`` is an interruption (EINTR or EAGAIN)."""
    return isinstance(err, (InterruptedError, BlockingIOError))


def retry_while_interrupted(func: Callable[[], T]) -> T:
    """Call ``func`` until it succeeds or fails with a non-interruption error."""
    while True:
        try:
            return func()
        except OSError as err:
            if not was_interrupted(err):
                raise