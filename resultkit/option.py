"""
Option
======

Optional value container: either ``Present(value)`` or ``Empty()``.

``Present`` never wraps ``None``: ``present(None)`` is ``Empty()``.
Instances are immutable, every operation returns a new Option.

Example:
    present(4).map(lambda x: x * 2).get_or_else(0)   # 8
    empty().map(lambda x: x * 2).get_or_else(0)      # 0

    match lookup(user_id):
        case Present(user):
            ...
        case Empty():
            ...
"""

from __future__ import annotations

import typing
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator

if typing.TYPE_CHECKING:
    from .result import Result


class Option[T](ABC):
    """Base of the two Option variants."""

    __slots__ = ()

    @staticmethod
    def from_optional[V](value: V | None, /) -> Option[V]:
        """Lift ``V | None`` into an Option. Alias of ``present``."""
        return present(value)

    @staticmethod
    def run[V](factory: Callable[[], Generator[Option[typing.Any], typing.Any, V]], /) -> Option[V]:
        """
        Drive a generator of Options in imperative style.

        Each yielded Option is unwrapped and its value sent back into the
        generator. The first ``Empty`` stops the generator (it is closed)
        and becomes the result. The generator's return value is lifted with
        ``present``.

        Example:
            def pipeline():
                user = yield find_user(42)
                address = yield find_address(user)
                return address.city

            Option.run(pipeline)
        """
        gen = factory()
        sent: typing.Any = None
        while True:
            try:
                yielded = gen.send(sent)
            except StopIteration as stop:
                return present(stop.value)
            match yielded:
                case Present(value):
                    sent = value
                case Empty():
                    gen.close()
                    return Empty()
                case _:
                    gen.close()
                    raise TypeError(f"Option.run(): expected an Option, got {yielded!r}")

    @abstractmethod
    def is_present(self) -> bool: ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def map[U](self, f: Callable[[T], U | None], /) -> Option[U]: ...

    @abstractmethod
    def flat_map[U](self, f: Callable[[T], Option[U]], /) -> Option[U]: ...

    @abstractmethod
    def match[U](self, *, on_present: Callable[[T], U], on_empty: Callable[[], U]) -> U: ...

    @abstractmethod
    def flat_match[U](
        self,
        *,
        on_present: Callable[[T], Option[U]],
        on_empty: Callable[[], Option[U]],
    ) -> Option[U]: ...

    @abstractmethod
    def get_or_else[R](self, default: R, /) -> T | R: ...

    @abstractmethod
    def extract(self) -> T | None: ...

    def to_result[E](self, error: E, /) -> Result[T, E]:
        """Present -> Success(value), Empty -> Failure(error)."""
        from .result import failure, success

        match self:
            case Present(value):
                return success(value)
            case _:
                return failure(error)


class Present[T](Option[T]):
    """Option holding a value."""

    __slots__ = ("_value",)
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        if value is None:
            raise ValueError("Present cannot hold None, use present() or empty()")
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def is_present(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U | None], /) -> Option[U]:
        return present(f(self._value))

    def flat_map[U](self, f: Callable[[T], Option[U]], /) -> Option[U]:
        return f(self._value)

    def match[U](self, *, on_present: Callable[[T], U], on_empty: Callable[[], U]) -> U:
        return on_present(self._value)

    def flat_match[U](
        self,
        *,
        on_present: Callable[[T], Option[U]],
        on_empty: Callable[[], Option[U]],
    ) -> Option[U]:
        return on_present(self._value)

    def get_or_else[R](self, default: R, /) -> T | R:
        return self._value

    def extract(self) -> T:
        return self._value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Present) and self._value == other._value

    def __hash__(self) -> int:
        return hash((Present, self._value))

    def __repr__(self) -> str:
        return f"Present({self._value!r})"


class Empty[T](Option[T]):
    """Option holding nothing."""

    __slots__ = ()

    def is_present(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return True

    def map[U](self, f: Callable[[T], U | None], /) -> Option[U]:
        return Empty()

    def flat_map[U](self, f: Callable[[T], Option[U]], /) -> Option[U]:
        return Empty()

    def match[U](self, *, on_present: Callable[[T], U], on_empty: Callable[[], U]) -> U:
        return on_empty()

    def flat_match[U](
        self,
        *,
        on_present: Callable[[T], Option[U]],
        on_empty: Callable[[], Option[U]],
    ) -> Option[U]:
        return on_empty()

    def get_or_else[R](self, default: R, /) -> R:
        return default

    def extract(self) -> None:
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Empty)

    def __hash__(self) -> int:
        return hash(Empty)

    def __repr__(self) -> str:
        return "Empty()"


# Convenience Constructors
def present[T](value: T | None, /) -> Option[T]:
    """Create an Option from a value; ``None`` gives ``Empty()``."""
    if value is None:
        return Empty()
    return Present(value)


def empty[T]() -> Option[T]:
    """Create an empty Option."""
    return Empty()


__all__ = (
    "Empty",
    "Option",
    "Present",
    "empty",
    "present",
)
