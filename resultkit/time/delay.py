"""Delay combinators

Timer-backed Futures on the running asyncio loop."""

from __future__ import annotations

import asyncio
import typing

from .._types import Cancel, NoError, Reject, Resolve
from ..future.core import Future


def after[V](seconds: float, value: V = None) -> Future[V, NoError]:
    """
    Resolve with ``value`` after ``seconds``.

    The cancel function clears the pending timer, the Future then never
    settles.

    Example:
        await after(0.5, "tick")                     # 'tick'
        await after(0.5, TimeoutError()).swap()      # raises TimeoutError
    """

    def action(resolve: Resolve[V], reject: Reject[NoError]) -> Cancel:
        handle = asyncio.get_running_loop().call_later(seconds, resolve, value)

        def cancel() -> bool:
            handle.cancel()
            return True

        return cancel

    return Future(action)


def delay[T, E](future: Future[T, E], *, seconds: float) -> Future[T, E]:
    """Sleep before running."""
    if seconds <= 0.0:
        return future
    return after(seconds, typing.cast(T, None)).flat_map(lambda _: future)


__all__ = ("after", "delay")
