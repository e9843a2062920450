"""Caller-supplied deadlines for store operations.

A caller opens ``store_deadline(seconds)`` around any domain call; every store
operation started inside the block is bounded by the time left, on top of the
repository's own per-operation timeout. Expiry surfaces as
``StorageTimeoutError`` from the repository, never as a bare cancellation.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import time

_deadline: ContextVar[float | None] = ContextVar("store_deadline", default=None)


@contextmanager
def store_deadline(seconds: float) -> Iterator[None]:
    """Bound every store operation inside the block.

    Nested blocks can only tighten the deadline, never extend it.

    Args:
        seconds: Time budget from now
    """
    deadline = time.monotonic() + seconds
    outer = _deadline.get()
    if outer is not None:
        deadline = min(deadline, outer)

    token = _deadline.set(deadline)
    try:
        yield
    finally:
        _deadline.reset(token)


def effective_timeout(timeout: float | None) -> float | None:
    """Combine an operation's own timeout with the caller's remaining budget.

    Returns:
        Seconds the next operation may take, or None for no bound
    """
    deadline = _deadline.get()
    if deadline is None:
        return timeout

    remaining = max(deadline - time.monotonic(), 0.0)
    return remaining if timeout is None else min(timeout, remaining)
