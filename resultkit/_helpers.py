"""Internal helpers for resultkit.

Small functions and the cancel chain shared by the Future engine and the
combinators. Not part of the public API."""

from __future__ import annotations

import typing

from ._types import Cancel


# Identity function
def identity[T](x: T) -> T:
    """Identity function: returns its argument unchanged."""
    return x


def always_true() -> bool:
    """Default cancel function: nothing to cancel, accept."""
    return True


def noop(_: typing.Any) -> None:
    """Callback that ignores its argument."""


class CancelChain:
    """
    Cancel function composed of the cancel functions of several stages.

    Used wherever one trigger starts more than one Future (flat_map stages,
    parallel fan-out). Calling the chain cancels every stage registered so
    far; a stage registered after the chain was called is cancelled on the
    spot. Each stage is cancelled at most once.

    Example:
        chain = CancelChain()
        chain.add(first.extract(resolve, reject))
        chain.add(second.extract(resolve, reject))
        return chain  # usable as the action's cancel function
    """

    __slots__ = ("_stages", "_cancelled")

    def __init__(self) -> None:
        self._stages: list[Cancel] = []
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add(self, cancel: Cancel, /) -> None:
        if self._cancelled:
            cancel()
            return
        self._stages.append(cancel)

    def __call__(self) -> bool:
        self._cancelled = True
        stages, self._stages = self._stages, []
        accepted = True
        for cancel in stages:
            accepted = bool(cancel()) and accepted
        return accepted


__all__ = (
    "CancelChain",
    "always_true",
    "identity",
    "noop",
)
