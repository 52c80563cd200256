# 📄 File: app/shared/core/deadline.py
# 🧭 Purpose (Layman Explanation):
# Lets a caller say "answer within N seconds" once, and makes every database and cache
# call made for that answer respect the same stopwatch.
# 🧪 Purpose (Technical Summary):
# Context-variable deadline propagation: deadline_scope() records an absolute loop time,
# within_deadline() bounds a single awaitable by the time remaining.
# 🔗 Dependencies:
# asyncio, contextvars
# 🔄 Connected Modules / Calls From:
# Catalog repositories (store calls), cache backends (cache calls), application handlers

import asyncio
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Awaitable, Iterator, Optional, TypeVar

T = TypeVar("T")

_deadline_var: ContextVar[Optional[float]] = ContextVar("catalog_deadline", default=None)


@contextmanager
def deadline_scope(timeout: Optional[float]) -> Iterator[Optional[float]]:
    """
    Bind a deadline `timeout` seconds from now for the enclosed block.

    Nested scopes can only tighten the deadline. A `None` timeout keeps
    whatever deadline is already in effect.
    """
    current = _deadline_var.get()
    if timeout is None:
        yield current
        return

    deadline = asyncio.get_running_loop().time() + timeout
    if current is not None:
        deadline = min(deadline, current)

    token = _deadline_var.set(deadline)
    try:
        yield deadline
    finally:
        _deadline_var.reset(token)


def remaining_time() -> Optional[float]:
    """Seconds left before the active deadline, or None when unbounded."""
    deadline = _deadline_var.get()
    if deadline is None:
        return None
    return max(0.0, deadline - asyncio.get_running_loop().time())


async def within_deadline(awaitable: Awaitable[T]) -> T:
    """
    Await `awaitable`, bounded by the active deadline.

    Raises:
        TimeoutError: If the deadline passes first
    """
    remaining = remaining_time()
    if remaining is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=remaining)
