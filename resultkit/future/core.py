"""Future

Lazy, cancellable asynchronous computation with a success and a failure
channel.

A Future owns one action ``action(resolve, reject) -> cancel``. Building a
Future (or chaining one) runs nothing; the action runs on every trigger:
``extract``, ``await_``, ``await_or_else``, ``to_result``, ``to_option`` or
``await future``. Nothing is memoized, triggering twice runs the action
twice.

Failures are data: an exception raised by a callback handed to ``map``,
``flat_map``, ``map_err``, ``flat_map_err``, the ``match`` family or ``tap``
becomes a failure of the chain. Only ``await_()`` raises."""

from __future__ import annotations

import asyncio
import inspect
import logging
import typing
from collections.abc import Awaitable, Callable, Coroutine, Generator, Sequence
from functools import partial

from .._errors import RejectedError
from .._helpers import CancelChain, always_true, identity
from .._types import Action, Cancel, NoError, Reject, Resolve
from ..option import Option, Present
from ..result import Failure, Result, Success
from .settlement import Settlement

if typing.TYPE_CHECKING:
    from ..concurrency.policy import ParallelPolicy

log = logging.getLogger(__name__)


class Future[T, E]:
    """Lazy Future.

    Example:
        user = (
            Future.from_awaitable(lambda: api.fetch_user(42))
            .map(lambda u: u.name)
            .map_err(lambda e: ApiError(str(e)))
        )
        name = await user  # nothing ran before this line
    """

    __slots__ = ("_action", "_root", "_stages")

    def __init__(self, action: Action[T, E], /) -> None:
        """Create a Future from an action. The action is not called here."""
        self._action = action
        # chained Futures point at the Future their stages are bound on
        self._root: Future[typing.Any, typing.Any] = self
        self._stages: _Stages | None = None

    # ========================================================================
    # Constructors
    # ========================================================================

    @staticmethod
    def of[V](value: V, cancel: Cancel = always_true) -> Future[V, NoError]:
        """Future that resolves with ``value`` as soon as it is triggered."""

        def action(resolve: Resolve[V], reject: Reject[NoError]) -> Cancel:
            resolve(value)
            return cancel

        return Future(action)

    @staticmethod
    def reject[Err](error: Err, cancel: Cancel = always_true) -> Future[NoError, Err]:
        """Future that fails with ``error`` as soon as it is triggered. Dual of of()."""

        def action(resolve: Resolve[NoError], reject: Reject[Err]) -> Cancel:
            reject(error)
            return cancel

        return Future(action)

    @staticmethod
    def from_awaitable[V, Err](
        source: Awaitable[V] | Callable[[], Awaitable[V]],
        mapper: Callable[[BaseException], Err] = identity,
    ) -> Future[V, Err]:
        """
        Bridge asyncio code into a Future.

        **Factory** (zero-arg callable returning an awaitable): lazy. The
        factory runs on every trigger, its awaitable is wrapped in a task and
        the cancel function cancels that task.

        **Awaitable** (coroutine, task, asyncio future): eager/shared. It is
        wrapped in a task once, on the first trigger, and every trigger
        observes that same task. Cancel is a no-op returning True since the
        task is shared.

        A raised exception goes through ``mapper`` into the failure channel.
        A cancelled task never settles the Future.

        Example:
            Future.from_awaitable(lambda: client.get(url))          # lazy
            Future.from_awaitable(client.get(url))                  # shared
            Future.from_awaitable(lambda: read(path), mapper=str)   # str errors

        NOTE: prefer the factory form, a coroutine object can only run once.
        """
        if inspect.isawaitable(source):
            shared: asyncio.Future[V] | None = None

            def shared_action(resolve: Resolve[V], reject: Reject[Err]) -> Cancel:
                nonlocal shared
                if shared is None:
                    shared = asyncio.ensure_future(source, loop=asyncio.get_running_loop())
                _settle_from(shared, resolve, reject, mapper)
                return always_true

            return Future(shared_action)

        factory = typing.cast("Callable[[], Awaitable[V]]", source)

        def action(resolve: Resolve[V], reject: Reject[Err]) -> Cancel:
            try:
                awaitable = factory()
            except Exception as exc:
                reject(_map_error(mapper, exc))
                return always_true
            task = asyncio.ensure_future(awaitable, loop=asyncio.get_running_loop())
            _settle_from(task, resolve, reject, mapper)
            return task.cancel

        return Future(action)

    @staticmethod
    def from_fn[V, **P](
        fn: Callable[P, V],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Future[V, Exception]:
        """
        Run a sync function on trigger.

        Return value -> success, raised Exception -> failure.

        Example:
            Future.from_fn(json.loads, raw).map(lambda d: d["id"])
        """

        def action(resolve: Resolve[V], reject: Reject[Exception]) -> Cancel:
            try:
                value = fn(*args, **kwargs)
            except Exception as exc:
                reject(exc)
            else:
                resolve(value)
            return always_true

        return Future(action)

    @staticmethod
    def from_result[V, Err](result: Result[V, Err], /) -> Future[V, Err]:
        """Lift an already computed Result. NOTE: not lazy, the Result exists."""

        def action(resolve: Resolve[V], reject: Reject[Err]) -> Cancel:
            match result:
                case Success(value):
                    resolve(value)
                case Failure(error):
                    reject(error)
            return always_true

        return Future(action)

    @staticmethod
    def from_option[V, Err](option: Option[V], /, *, error: Callable[[], Err]) -> Future[V, Err]:
        """
        Lift an Option. Empty becomes a failure with ``error()``.

        ``error`` is a thunk so the error is only built when needed.
        """

        def action(resolve: Resolve[V], reject: Reject[Err]) -> Cancel:
            match option:
                case Present(value):
                    resolve(value)
                case _:
                    reject(error())
            return always_true

        return Future(action)

    @staticmethod
    def lazy[V, Err](
        thunk: Callable[[], Coroutine[typing.Any, typing.Any, Result[V, Err]]],
        /,
    ) -> Future[V, Err]:
        """
        Wrap an async function returning a Result.

        This is the shape combinators build on: ``async def run() -> Result``
        then ``Future.lazy(run)``. An exception escaping ``thunk`` is a
        failure too.
        """
        return Future.from_awaitable(thunk).flat_map(Future.from_result)

    @staticmethod
    def after[V](seconds: float, value: V = None) -> Future[V, NoError]:
        """Timer-backed Future resolving with ``value`` after ``seconds``."""
        from ..time.delay import after

        return after(seconds, value)

    # ========================================================================
    # Combinators (implemented in resultkit.concurrency / resultkit.control)
    # ========================================================================

    @staticmethod
    def seq[V, Err](futures: Sequence[Future[V, Err]], /) -> Future[list[V], Err]:
        """Run one after another, fail on the first failure."""
        from ..concurrency.sequential import seq

        return seq(futures)

    @staticmethod
    def seq_safe[V, Err](futures: Sequence[Future[V, Err]], /) -> Future[list[V | Err], NoError]:
        """Run one after another, collect every outcome."""
        from ..concurrency.sequential import seq_safe

        return seq_safe(futures)

    @staticmethod
    def all[V, Err](
        futures: Sequence[Future[V, Err]],
        limit: int | None = None,
        /,
        *,
        policy: ParallelPolicy | None = None,
    ) -> Future[list[V], Err]:
        """Run concurrently (in batches of ``limit`` when > 0), fail on the first failure."""
        from ..concurrency.parallel import all_

        if policy is None:
            return all_(futures, limit)
        return all_(futures, limit, policy=policy)

    @staticmethod
    def all_safe[V, Err](
        futures: Sequence[Future[V, Err]],
        limit: int | None = None,
        /,
    ) -> Future[list[V | Err], NoError]:
        """Run concurrently (in batches of ``limit`` when > 0), collect every outcome."""
        from ..concurrency.parallel import all_safe

        return all_safe(futures, limit)

    @staticmethod
    def run[V](
        factory: Callable[[], Generator[Future[typing.Any, typing.Any], typing.Any, V]],
        /,
    ) -> Future[V, typing.Any]:
        """Drive a generator of Futures. See resultkit.control.run."""
        from ..control.run import run

        return run(factory)

    # ========================================================================
    # Triggers
    # ========================================================================

    def extract(self, on_success: Resolve[T], on_failure: Reject[E]) -> Cancel:
        """
        Run the action. Returns the cancel function of this trigger.

        Exactly one of the callbacks is called, at most once. After the
        cancel function is called, neither is. An action raising before it
        settled is a failure with the raised exception.
        """
        settlement = Settlement(on_success, on_failure)
        try:
            cancel = self._action(settlement.resolve, settlement.reject)
        except Exception as exc:
            if settlement.settled:
                raise
            settlement.reject(exc)
            cancel = None
        settlement.bind(cancel)
        return settlement.cancel

    def await_(self) -> asyncio.Future[T]:
        """
        Trigger and return an asyncio future of the success value.

        The asyncio future fails with the failure value when it is an
        exception, otherwise with ``RejectedError(error)``. Cancelling it
        cancels this trigger.
        """
        loop = asyncio.get_running_loop()
        promise: asyncio.Future[T] = loop.create_future()
        cancel = self.extract(
            partial(_set_result, promise),
            lambda error: _set_exception(promise, _as_exception(error)),
        )
        promise.add_done_callback(partial(_cancel_if_cancelled, cancel))
        return promise

    def await_or_else[R](self, default: R) -> asyncio.Future[T | R]:
        """Like await_(), but resolves with ``default`` instead of failing."""
        loop = asyncio.get_running_loop()
        promise: asyncio.Future[T | R] = loop.create_future()
        cancel = self.extract(
            partial(_set_result, promise),
            lambda _: _set_result(promise, default),
        )
        promise.add_done_callback(partial(_cancel_if_cancelled, cancel))
        return promise

    async def to_result(self) -> Result[T, E]:
        """Trigger and wait. Success -> Success(value), failure -> Failure(error)."""
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[Result[T, E]] = loop.create_future()
        cancel = self.extract(
            lambda value: _set_result(outcome, Success(value)),
            lambda error: _set_result(outcome, Failure(error)),
        )
        try:
            return await outcome
        except asyncio.CancelledError:
            cancel()
            raise

    async def to_option(self) -> Option[T]:
        """Trigger and wait. Success -> present(value), any failure -> empty()."""
        return (await self.to_result()).to_option()

    def __await__(self) -> Generator[typing.Any, None, T]:
        """Allow direct ``await future``."""
        return self.await_().__await__()

    # ========================================================================
    # Transformations
    # ========================================================================

    def map[U](self, f: Callable[[T], U], /) -> Future[U, E]:
        """Functor map over the success value."""
        return self.flat_map(lambda value: Future.of(f(value)))

    def map_err[F](self, f: Callable[[E], F], /) -> Future[T, F]:
        """Map over the failure value."""
        return self.flat_map_err(lambda error: Future.reject(f(error)))

    def flat_map[U](self, f: Callable[[T], Future[U, E]], /) -> Future[U, E]:
        """
        Monadic bind.

        - On success: continues with ``f(value)``
        - On failure: short-circuit, ``f`` is not called
        """
        return self._bind(f, None)

    def flat_map_err[F](self, f: Callable[[E], Future[T, F]], /) -> Future[T, F]:
        """Bind on the failure channel. Success passes through."""
        return self._bind(None, f)

    def swap(self) -> Future[E, T]:
        """Exchange the success and failure channels."""

        def action(resolve: Resolve[E], reject: Reject[T]) -> Cancel:
            return self.extract(reject, resolve)

        return Future(action)

    def match[U](
        self,
        *,
        on_success: Callable[[T], U],
        on_failure: Callable[[E], U],
    ) -> Future[U, NoError]:
        """Fold both channels into an always-succeeding Future."""
        return self._bind(
            lambda value: Future.of(on_success(value)),
            lambda error: Future.of(on_failure(error)),
        )

    def match_err[U](
        self,
        *,
        on_success: Callable[[T], U],
        on_failure: Callable[[E], U],
    ) -> Future[NoError, U]:
        """Fold both channels into an always-failing Future."""
        return self._bind(
            lambda value: Future.reject(on_success(value)),
            lambda error: Future.reject(on_failure(error)),
        )

    def flat_match[U, F](
        self,
        *,
        on_success: Callable[[T], Future[U, F]],
        on_failure: Callable[[E], Future[U, F]],
    ) -> Future[U, F]:
        """Continue with the Future returned by the handler of the channel."""
        return self._bind(on_success, on_failure)

    def flat_match_err[U](
        self,
        *,
        on_success: Callable[[T], Future[T, U]],
        on_failure: Callable[[E], Future[T, U]],
    ) -> Future[T, U]:
        """flat_match whose handlers keep the success type and change the failure type."""
        return self._bind(on_success, on_failure)

    def tap(self, effect: Callable[[T], None], /) -> Future[T, E]:
        """Run a side effect on the success value, pass it through unchanged."""

        def run(value: T) -> Future[T, E]:
            effect(value)
            return Future.of(value)

        return self.flat_map(run)

    def tap_err(self, effect: Callable[[E], None], /) -> Future[T, E]:
        """Run a side effect on the failure value, pass it through unchanged."""

        def run(error: E) -> Future[T, E]:
            effect(error)
            return Future.reject(error)

        return self.flat_map_err(run)

    # ========================================================================
    # Internals
    # ========================================================================

    def _bind[U, F](
        self,
        on_success: Callable[[T], Future[U, F]] | None,
        on_failure: Callable[[E], Future[U, F]] | None,
    ) -> Future[U, F]:
        # None = pass the channel through untouched.
        # Stages are stacked on the root Future, a trigger runs them in a
        # loop (see _ChainRun), so a long chain never deepens the stack.
        root = self._root
        stages: _Stages = (self._stages, (on_success, on_failure))
        chained: Future[U, F] = Future(partial(_run_chain, root, stages))
        chained._root = root
        chained._stages = stages
        return chained

    def __repr__(self) -> str:
        if self._stages is not None:
            return f"{self._root!r}.chain({_count(self._stages)} stages)"
        return f"Future({getattr(self._action, '__qualname__', self._action)!r})"


# ============================================================================
# Chain runner
# ============================================================================

type _Handler = Callable[[typing.Any], Future[typing.Any, typing.Any]] | None
type _Stage = tuple[_Handler, _Handler]
type _Stages = tuple[_Stages | None, _Stage]


class _Link:
    """Callbacks of one stage: hold a synchronous outcome, forward a late one."""

    __slots__ = ("_advance", "_outcome", "_attached")

    def __init__(self, advance: Callable[[bool, typing.Any], None]) -> None:
        self._advance = advance
        self._outcome: tuple[bool, typing.Any] | None = None
        self._attached = True

    def resolve(self, value: typing.Any) -> None:
        self._settle(True, value)

    def reject(self, error: typing.Any) -> None:
        self._settle(False, error)

    def detach(self) -> tuple[bool, typing.Any] | None:
        self._attached = False
        return self._outcome

    def _settle(self, ok: bool, payload: typing.Any) -> None:
        if self._attached:
            self._outcome = (ok, payload)
        else:
            self._advance(ok, payload)


class _ChainRun:
    """
    One trigger of a chained Future.

    Stages wait on a stack, the next one on top. A stage settling
    synchronously is consumed by the loop in ``drive``; only a stage that
    settles later re-enters through ``advance``, from its own callback.
    """

    __slots__ = ("_pending", "_resolve", "_reject", "cancels")

    def __init__(self, stages: _Stages, resolve: Resolve[typing.Any], reject: Reject[typing.Any]) -> None:
        self._pending: list[_Stage] = []
        _push(self._pending, stages)
        self._resolve = resolve
        self._reject = reject
        self.cancels = CancelChain()

    def drive(self, future: Future[typing.Any, typing.Any] | None) -> None:
        while future is not None and not self.cancels.cancelled:
            if future._stages is not None:
                _push(self._pending, future._stages)
                future = future._root
            link = _Link(self.advance)
            self.cancels.add(future.extract(link.resolve, link.reject))
            outcome = link.detach()
            if outcome is None:
                return
            future = self._apply(*outcome)

    def advance(self, ok: bool, payload: typing.Any) -> None:
        self.drive(self._apply(ok, payload))

    def _apply(self, ok: bool, payload: typing.Any) -> Future[typing.Any, typing.Any] | None:
        # Pop stages until one hands back a Future; settle when none is left.
        while self._pending:
            on_success, on_failure = self._pending.pop()
            handler = on_success if ok else on_failure
            if handler is None:
                continue
            try:
                following = handler(payload)
            except Exception as exc:
                ok, payload = False, exc
                continue
            if isinstance(following, Future):
                return following
            ok, payload = False, TypeError(f"expected a Future, got {following!r}")
        if ok:
            self._resolve(payload)
        else:
            self._reject(payload)
        return None


def _run_chain(
    root: Future[typing.Any, typing.Any],
    stages: _Stages,
    resolve: Resolve[typing.Any],
    reject: Reject[typing.Any],
) -> Cancel:
    run = _ChainRun(stages, resolve, reject)
    run.drive(root)
    return run.cancels


def _push(pending: list[_Stage], stages: _Stages | None) -> None:
    # the newest stage goes in first so the oldest ends on top
    while stages is not None:
        stages, stage = stages
        pending.append(stage)


def _count(stages: _Stages | None) -> int:
    count = 0
    while stages is not None:
        stages, _ = stages
        count += 1
    return count


# ============================================================================
# asyncio plumbing
# ============================================================================


def _map_error[Err](mapper: Callable[[BaseException], Err], exc: BaseException) -> Err:
    try:
        return mapper(exc)
    except Exception as mapper_exc:
        log.debug("Error mapper raised %r while mapping %r", mapper_exc, exc)
        return typing.cast(Err, mapper_exc)


def _settle_from[V, Err](
    task: asyncio.Future[V],
    resolve: Resolve[V],
    reject: Reject[Err],
    mapper: Callable[[BaseException], Err],
) -> None:
    def on_done(done: asyncio.Future[V]) -> None:
        if done.cancelled():
            log.debug("Task %r cancelled, Future left unsettled", done)
            return
        exc = done.exception()
        if exc is None:
            resolve(done.result())
            return
        reject(_map_error(mapper, exc))

    task.add_done_callback(on_done)


def _as_exception(error: object) -> BaseException:
    # asyncio refuses StopIteration as a future exception
    if isinstance(error, BaseException) and not isinstance(error, StopIteration):
        return error
    return RejectedError(error)


def _set_result[V](promise: asyncio.Future[V], value: V) -> None:
    if not promise.done():
        promise.set_result(value)


def _set_exception(promise: asyncio.Future[typing.Any], exc: BaseException) -> None:
    if not promise.done():
        promise.set_exception(exc)


def _cancel_if_cancelled(cancel: Cancel, promise: asyncio.Future[typing.Any]) -> None:
    if promise.cancelled():
        cancel()


__all__ = ("Future",)
