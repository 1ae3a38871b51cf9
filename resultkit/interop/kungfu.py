"""
kungfu bridge
=============

Conversions between resultkit and the ``kungfu`` library:

- ``Result``  <-> kungfu ``Ok`` / ``Error``
- ``Future``  <-> kungfu ``LazyCoroResult``

Both sides are lazy, a converted Future or LazyCoroResult runs nothing
until it is awaited.

Example:
    from kungfu import LazyCoroResult
    from resultkit.interop.kungfu import from_lazy_coro_result

    users = [from_lazy_coro_result(fetch_user(i)) for i in ids]
    await all_(users, 5)
"""

from __future__ import annotations

import typing

from kungfu import Error, LazyCoroResult, Ok
from kungfu import Result as KungfuResult

from ..future.core import Future
from ..result import Failure, Result, Success


def to_kungfu[T, E](result: Result[T, E], /) -> KungfuResult[T, E]:
    """Success -> Ok, Failure -> Error."""
    match result:
        case Success(value):
            return Ok(value)
        case Failure(error):
            return Error(error)
        case _:
            raise TypeError(f"to_kungfu(): expected a Result, got {result!r}")


def from_kungfu[T, E](result: KungfuResult[T, E], /) -> Result[T, E]:
    """Ok -> Success, Error -> Failure."""
    match result:
        case Ok(value):
            return Success(value)
        case Error(error):
            return Failure(error)
        case _:
            raise TypeError(f"from_kungfu(): expected a kungfu Result, got {result!r}")


def to_lazy_coro_result[T, E](future: Future[T, E], /) -> LazyCoroResult[T, E]:
    """Each await of the LazyCoroResult triggers ``future`` once."""

    async def run() -> KungfuResult[T, E]:
        return to_kungfu(await future.to_result())

    return LazyCoroResult(run)


def from_lazy_coro_result[T, E](lazy: LazyCoroResult[T, E], /) -> Future[T, E]:
    """Each trigger of the Future awaits ``lazy`` once."""

    async def run() -> Result[T, E]:
        outcome: typing.Any = await lazy
        return from_kungfu(outcome)

    return Future.lazy(run)


__all__ = (
    "from_kungfu",
    "from_lazy_coro_result",
    "to_kungfu",
    "to_lazy_coro_result",
)
