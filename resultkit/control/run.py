"""
Generator runner
================

Imperative-style notation for chains of ``flat_map``.

A generator yields Futures; the runner sends the success value of each one
back in. The first failure ends the run: the generator is closed, never
resumed, and the failure becomes the result. The generator's return value
is the success value.

    def checkout(cart_id: int):
        cart = yield from bind(load_cart(cart_id))
        total = yield from bind(price(cart))
        receipt = yield from bind(charge(cart.owner, total))
        return receipt.id

    receipt_id = await run(lambda: checkout(7))

is the same computation as

    load_cart(7).flat_map(
        lambda cart: price(cart).flat_map(
            lambda total: charge(cart.owner, total).map(lambda r: r.id)
        )
    )
"""

from __future__ import annotations

import typing
from collections.abc import Callable, Generator

from ..future.core import Future


def bind[T](future: Future[T, typing.Any], /) -> Generator[Future[T, typing.Any], typing.Any, T]:
    """
    Yield ``future`` and return its success value, typed.

    ``value = yield from bind(future)`` reads like ``value = yield future``
    but keeps ``T`` for type checkers.
    """
    value = yield future
    return value


def run[T](
    factory: Callable[[], Generator[Future[typing.Any, typing.Any], typing.Any, T]],
    /,
) -> Future[T, typing.Any]:
    """
    Drive a generator of Futures.

    ``factory`` is called on every trigger, so the Future can be triggered
    more than once. An exception raised by the generator body is a failure.
    Steps that settle synchronously are consumed in a loop by the chain
    runner, so a generator may yield any number of them.
    """

    def start(_: None) -> Future[T, typing.Any]:
        gen = factory()

        def abort(error: typing.Any) -> Future[T, typing.Any]:
            gen.close()
            return Future.reject(error)

        def step(sent: typing.Any) -> Future[T, typing.Any]:
            try:
                yielded = gen.send(sent)
            except StopIteration as stop:
                return Future.of(stop.value)
            if not isinstance(yielded, Future):
                gen.close()
                raise TypeError(f"run(): expected a Future, got {yielded!r}")
            return yielded.flat_map_err(abort).flat_map(step)

        return step(None)

    return Future.of(None).flat_map(start)


__all__ = ("bind", "run")
