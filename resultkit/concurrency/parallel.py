"""
Parallel combinators
====================

``all_`` / ``all_safe``: trigger Futures concurrently and collect their
outcomes in input order.

- ``limit=0``: every Future is triggered synchronously, in order, when the
  combinator is triggered. Their async work interleaves on the event loop.
- ``limit=n``: consecutive batches of ``n``. A batch is fully settled
  before the next batch is triggered (batches, not a sliding window).

Every outcome is written into the slot of its index, so completion order
never changes placement.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Sequence

from .._helpers import CancelChain
from .._types import Cancel, NoError, Reject, Resolve
from ..future.core import Future
from ..result import Failure, Result, Success
from .policy import ParallelPolicy

log = logging.getLogger(__name__)


# ============================================================================
# Unbounded fan-out
# ============================================================================


def _fan_out[T, E](
    futures: Sequence[Future[T, E]],
    *,
    fail_fast: bool,
    cancel_pending: bool,
) -> Future[list[typing.Any], E]:
    """
    Trigger every Future now, resolve once all settled.

    ``fail_fast``: the first failure rejects the whole and stops triggering
    the rest; started siblings are cancelled when ``cancel_pending``.
    Otherwise failure values are collected like success values.
    """

    def action(resolve: Resolve[list[typing.Any]], reject: Reject[E]) -> Cancel:
        stages = CancelChain()
        slots: list[typing.Any] = [None] * len(futures)
        remaining = len(futures)
        failed = False

        if remaining == 0:
            resolve([])
            return stages

        def settle(index: int, payload: typing.Any) -> None:
            nonlocal remaining
            slots[index] = payload
            remaining -= 1
            if remaining == 0:
                resolve(slots)

        def fail(error: E) -> None:
            nonlocal failed
            if failed:
                return
            failed = True
            if cancel_pending:
                log.debug("all_(): failure observed, cancelling pending futures")
                stages()
            reject(error)

        for index, future in enumerate(futures):
            if failed:
                break
            on_failure = fail if fail_fast else (lambda error, i=index: settle(i, error))
            stages.add(future.extract(lambda value, i=index: settle(i, value), on_failure))

        return stages

    return Future(action)


# ============================================================================
# Batched
# ============================================================================


def _batched[T, E](
    futures: Sequence[Future[T, E]],
    *,
    limit: int,
    fail_fast: bool,
    cancel_pending: bool,
) -> Future[list[typing.Any], E]:
    """Drain consecutive batches of ``limit`` through ``_fan_out``."""

    async def run() -> Result[list[typing.Any], E]:
        collected: list[typing.Any] = []
        for start in range(0, len(futures), limit):
            batch = _fan_out(
                futures[start : start + limit],
                fail_fast=fail_fast,
                cancel_pending=cancel_pending,
            )
            match await batch.to_result():
                case Success(values):
                    collected.extend(values)
                case Failure(error):
                    return Failure(error)
        return Success(collected)

    return Future.lazy(run)


def _combine[T, E](
    futures: Sequence[Future[T, E]],
    policy: ParallelPolicy,
    *,
    fail_fast: bool,
) -> Future[list[typing.Any], E]:
    snapshot = list(futures)
    if policy.limit == 0 or policy.limit >= len(snapshot):
        return _fan_out(snapshot, fail_fast=fail_fast, cancel_pending=policy.cancel_pending)
    return _batched(
        snapshot,
        limit=policy.limit,
        fail_fast=fail_fast,
        cancel_pending=policy.cancel_pending,
    )


def _resolve_policy(limit: int | None, policy: ParallelPolicy) -> ParallelPolicy:
    if limit is None:
        return policy
    return dataclasses.replace(policy, limit=limit)


# ============================================================================
# Public combinators
# ============================================================================


def all_[T, E](
    futures: Sequence[Future[T, E]],
    limit: int | None = None,
    /,
    *,
    policy: ParallelPolicy = ParallelPolicy(),
) -> Future[list[T], E]:
    """
    Run concurrently, fail on the first observed failure.

    ``limit`` overrides ``policy.limit``. Empty input resolves to ``[]``.

    Example:
        await all_([fetch(1), fetch(2), fetch(3)])       # all at once
        await all_(fetches, 3)                           # batches of 3
        await all_(fetches, policy=ParallelPolicy(cancel_pending=False))
    """
    return _combine(futures, _resolve_policy(limit, policy), fail_fast=True)


def all_safe[T, E](
    futures: Sequence[Future[T, E]],
    limit: int | None = None,
    /,
    *,
    policy: ParallelPolicy = ParallelPolicy(),
) -> Future[list[T | E], NoError]:
    """
    Run concurrently, collect every outcome. Never fails.

    Each slot holds the success value or the failure value of its Future.
    """
    combined = _combine(futures, _resolve_policy(limit, policy), fail_fast=False)
    return typing.cast("Future[list[T | E], NoError]", combined)


__all__ = ("all_", "all_safe")
