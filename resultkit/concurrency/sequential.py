"""
Sequential combinators
======================

Run Futures strictly one after another: future i+1 is triggered only once
future i has settled. Results match input order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .._helpers import noop
from .._types import NoError
from ..future.core import Future
from ..result import Failure, Result, Success

log = logging.getLogger(__name__)


def seq[T, E](futures: Sequence[Future[T, E]], /) -> Future[list[T], E]:
    """
    Run in order, stop at the first failure.

    On failure every Future left in the suffix is cancelled: it is triggered
    with no-op callbacks and its cancel function is called right away, so its
    cancel hook runs and nothing it does is observed.

    Example:
        await seq([fetch(1), fetch(2), fetch(3)])  # [u1, u2, u3]
    """
    snapshot = list(futures)

    async def run() -> Result[list[T], E]:
        values: list[T] = []
        for index, future in enumerate(snapshot):
            match await future.to_result():
                case Success(value):
                    values.append(value)
                case Failure(error):
                    _cancel_suffix(snapshot[index + 1 :])
                    return Failure(error)
        return Success(values)

    return Future.lazy(run)


def seq_safe[T, E](futures: Sequence[Future[T, E]], /) -> Future[list[T | E], NoError]:
    """
    Run in order, never stop.

    Each slot holds the success value or the failure value of its Future.
    Never fails.
    """
    snapshot = list(futures)

    async def run() -> Result[list[T | E], NoError]:
        outcomes: list[T | E] = []
        for future in snapshot:
            outcome = await future.to_result()
            outcomes.append(outcome.extract())
        return Success(outcomes)

    return Future.lazy(run)


def _cancel_suffix(rest: Sequence[Future[object, object]]) -> None:
    if rest:
        log.debug("seq(): cancelling %d remaining futures after failure", len(rest))
    for future in rest:
        try:
            future.extract(noop, noop)()
        except Exception:
            # the original failure wins
            log.debug("seq(): cancelling %r raised", future, exc_info=True)


__all__ = ("seq", "seq_safe")
