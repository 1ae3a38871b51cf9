from __future__ import annotations

import typing


class RejectedError(Exception):
    """Future failed with a value that is not an exception."""

    error: typing.Any

    def __init__(self, error: typing.Any) -> None:
        self.error = error
        super().__init__(f"Future rejected with {error!r}")


class UnwrapError(Exception):
    """unwrap() called on a Failure."""

    error: typing.Any

    def __init__(self, error: typing.Any) -> None:
        self.error = error
        super().__init__(f"Called unwrap() on Failure({error!r})")


__all__ = ("RejectedError", "UnwrapError")
