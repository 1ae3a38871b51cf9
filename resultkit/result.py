"""
Result
======

Two-branch container: ``Success(value)`` or ``Failure(error)``.

Both branches are typed independently, ``map`` and ``map_err`` change one
branch type and leave the other alone. ``extract()`` is total: it returns
whichever payload is populated and never raises.

Example:
    success(4).map(lambda x: x + 1)                # Success(5)
    failure("boom").map(lambda x: x + 1)           # Failure('boom')
    failure("boom").map_err(str.upper).extract()   # 'BOOM'

    match parse(raw):
        case Success(value):
            ...
        case Failure(error):
            ...
"""

from __future__ import annotations

import typing
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator

from ._errors import UnwrapError
from .option import Option, empty, present


class Result[T, E](ABC):
    """Base of the two Result variants."""

    __slots__ = ()

    @staticmethod
    def catching[V, **P](
        fn: Callable[P, V],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Result[V, Exception]:
        """
        Call ``fn`` and capture the outcome.

        Return value -> Success, raised Exception -> Failure(exception).

        Example:
            Result.catching(json.loads, raw)
        """
        try:
            return Success(fn(*args, **kwargs))
        except Exception as exc:
            return Failure(exc)

    @staticmethod
    def run[V, Err](
        factory: Callable[[], Generator[Result[typing.Any, Err], typing.Any, V]],
        /,
    ) -> Result[V, Err]:
        """
        Drive a generator of Results in imperative style.

        The success value of each yielded Result is sent back into the
        generator. The first Failure stops the generator (it is closed) and
        becomes the result. The return value is wrapped in Success.

        Example:
            def pipeline():
                raw = yield read_config(path)
                cfg = yield parse_config(raw)
                return cfg.name

            Result.run(pipeline)
        """
        gen = factory()
        sent: typing.Any = None
        while True:
            try:
                yielded = gen.send(sent)
            except StopIteration as stop:
                return Success(stop.value)
            match yielded:
                case Success(value):
                    sent = value
                case Failure(error):
                    gen.close()
                    return Failure(error)
                case _:
                    gen.close()
                    raise TypeError(f"Result.run(): expected a Result, got {yielded!r}")

    @abstractmethod
    def is_success(self) -> bool: ...

    @abstractmethod
    def is_failure(self) -> bool: ...

    @abstractmethod
    def map[U](self, f: Callable[[T], U], /) -> Result[U, E]: ...

    @abstractmethod
    def map_err[F](self, f: Callable[[E], F], /) -> Result[T, F]: ...

    @abstractmethod
    def flat_map[U](self, f: Callable[[T], Result[U, E]], /) -> Result[U, E]: ...

    @abstractmethod
    def flat_map_err[F](self, f: Callable[[E], Result[T, F]], /) -> Result[T, F]: ...

    @abstractmethod
    def match[U](self, *, on_success: Callable[[T], U], on_failure: Callable[[E], U]) -> U: ...

    @abstractmethod
    def flat_match[U, F](
        self,
        *,
        on_success: Callable[[T], Result[U, F]],
        on_failure: Callable[[E], Result[U, F]],
    ) -> Result[U, F]: ...

    @abstractmethod
    def get_or_else[R](self, default: R, /) -> T | R: ...

    @abstractmethod
    def extract(self) -> T | E: ...

    @abstractmethod
    def unwrap(self) -> T: ...

    @abstractmethod
    def to_option(self) -> Option[T]: ...


class Success[T, E](Result[T, E]):
    """Result holding a success value."""

    __slots__ = ("_value",)
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U], /) -> Result[U, E]:
        return Success(f(self._value))

    def map_err[F](self, f: Callable[[E], F], /) -> Result[T, F]:
        return Success(self._value)

    def flat_map[U](self, f: Callable[[T], Result[U, E]], /) -> Result[U, E]:
        return f(self._value)

    def flat_map_err[F](self, f: Callable[[E], Result[T, F]], /) -> Result[T, F]:
        return Success(self._value)

    def match[U](self, *, on_success: Callable[[T], U], on_failure: Callable[[E], U]) -> U:
        return on_success(self._value)

    def flat_match[U, F](
        self,
        *,
        on_success: Callable[[T], Result[U, F]],
        on_failure: Callable[[E], Result[U, F]],
    ) -> Result[U, F]:
        return on_success(self._value)

    def get_or_else[R](self, default: R, /) -> T:
        return self._value

    def extract(self) -> T:
        return self._value

    def unwrap(self) -> T:
        return self._value

    def to_option(self) -> Option[T]:
        return present(self._value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Success) and self._value == other._value

    def __hash__(self) -> int:
        return hash((Success, self._value))

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


class Failure[T, E](Result[T, E]):
    """Result holding a failure value."""

    __slots__ = ("_error",)
    __match_args__ = ("error",)

    def __init__(self, error: E) -> None:
        self._error = error

    @property
    def error(self) -> E:
        return self._error

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def map[U](self, f: Callable[[T], U], /) -> Result[U, E]:
        return Failure(self._error)

    def map_err[F](self, f: Callable[[E], F], /) -> Result[T, F]:
        return Failure(f(self._error))

    def flat_map[U](self, f: Callable[[T], Result[U, E]], /) -> Result[U, E]:
        return Failure(self._error)

    def flat_map_err[F](self, f: Callable[[E], Result[T, F]], /) -> Result[T, F]:
        return f(self._error)

    def match[U](self, *, on_success: Callable[[T], U], on_failure: Callable[[E], U]) -> U:
        return on_failure(self._error)

    def flat_match[U, F](
        self,
        *,
        on_success: Callable[[T], Result[U, F]],
        on_failure: Callable[[E], Result[U, F]],
    ) -> Result[U, F]:
        return on_failure(self._error)

    def get_or_else[R](self, default: R, /) -> R:
        return default

    def extract(self) -> E:
        return self._error

    def unwrap(self) -> typing.NoReturn:
        raise UnwrapError(self._error)

    def to_option(self) -> Option[T]:
        return empty()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Failure) and self._error == other._error

    def __hash__(self) -> int:
        return hash((Failure, self._error))

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"


# Convenience Constructors
def success[T](value: T, /) -> Result[T, typing.Never]:
    """Create a successful Result."""
    return Success(value)


def failure[E](error: E, /) -> Result[typing.Never, E]:
    """Create a failed Result."""
    return Failure(error)


__all__ = (
    "Failure",
    "Result",
    "Success",
    "failure",
    "success",
)
