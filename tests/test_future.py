import asyncio

import pytest

from resultkit import Empty, Failure, Future, Present, RejectedError, Success, empty, present, success, failure

# =============================================================================
# Construction and laziness
# =============================================================================


def test_constructing_does_not_run_action() -> None:
    invoked: list[bool] = []

    def action(resolve, reject):
        invoked.append(True)
        resolve(1)
        return lambda: True

    future = Future(action).map(lambda x: x + 1).flat_map(Future.of)
    assert invoked == []

    future.extract(lambda _: None, lambda _: None)
    assert invoked == [True]


def test_every_trigger_reruns_action() -> None:
    runs: list[int] = []
    future = Future.from_fn(lambda: runs.append(1) or len(runs))

    seen: list[int] = []
    future.extract(seen.append, pytest.fail)
    future.extract(seen.append, pytest.fail)
    assert seen == [1, 2]


def test_extract_calls_success_callback() -> None:
    seen: list[object] = []
    Future(lambda resolve, reject: resolve(15) or (lambda: True)).extract(seen.append, pytest.fail)
    assert seen == [15]


def test_extract_calls_failure_callback() -> None:
    seen: list[object] = []
    error = ValueError("error")
    Future.reject(error).extract(pytest.fail, seen.append)
    assert seen == [error]


def test_single_settlement_per_trigger() -> None:
    def faulty(resolve, reject):
        resolve(1)
        resolve(2)
        reject("late")
        return lambda: True

    successes: list[object] = []
    failures: list[object] = []
    Future(faulty).extract(successes.append, failures.append)
    assert successes == [1]
    assert failures == []


def test_action_without_cancel_function() -> None:
    cancel = Future(lambda resolve, reject: resolve(1)).extract(lambda _: None, lambda _: None)
    assert cancel() is True


def test_from_fn_captures_exception() -> None:
    seen: list[object] = []
    Future.from_fn(int, "nope").extract(pytest.fail, seen.append)
    assert isinstance(seen[0], ValueError)


def test_from_result_and_from_option() -> None:
    seen: list[object] = []
    Future.from_result(success(1)).extract(seen.append, pytest.fail)
    Future.from_result(failure("e")).extract(pytest.fail, seen.append)
    Future.from_option(present(2), error=lambda: "missing").extract(seen.append, pytest.fail)
    Future.from_option(empty(), error=lambda: "missing").extract(pytest.fail, seen.append)
    assert seen == [1, "e", 2, "missing"]


# =============================================================================
# Triggers
# =============================================================================


@pytest.mark.asyncio
async def test_await_or_else_on_failure() -> None:
    assert await Future.reject(ValueError("error")).await_or_else(4) == 4


@pytest.mark.asyncio
async def test_await_or_else_on_success() -> None:
    assert await Future.of(4).await_or_else(2) == 4


@pytest.mark.asyncio
async def test_await_returns_asyncio_future() -> None:
    promise = Future.of(4).await_()
    assert isinstance(promise, asyncio.Future)
    assert await promise == 4


@pytest.mark.asyncio
async def test_await_raises_exception_failure_as_is() -> None:
    with pytest.raises(ValueError, match="kill"):
        await Future.reject(ValueError("kill"))


@pytest.mark.asyncio
async def test_await_wraps_non_exception_failure() -> None:
    with pytest.raises(RejectedError) as info:
        await Future.reject("nope").await_()
    assert info.value.error == "nope"


@pytest.mark.asyncio
async def test_await_turns_raising_action_into_failure() -> None:
    def action(resolve, reject):
        raise KeyError("broken")

    with pytest.raises(KeyError):
        await Future(action)


@pytest.mark.asyncio
async def test_cancelling_await_cancels_trigger(counter, never_settles) -> None:
    promise = never_settles(counter).await_()
    promise.cancel()
    await asyncio.sleep(0.01)
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_timeout_composed_with_wait_for(counter, never_settles) -> None:
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(never_settles(counter).to_result(), timeout=0.01)
    assert counter.calls == 1


# =============================================================================
# map / map_err
# =============================================================================


@pytest.mark.asyncio
async def test_map_on_success() -> None:
    assert await Future.of(4).map(lambda n: n * 2).await_or_else(10) == 8


@pytest.mark.asyncio
async def test_map_on_failure() -> None:
    assert await Future.reject(ValueError("test")).map(lambda n: n * 2).await_or_else(10) == 10


@pytest.mark.asyncio
async def test_map_err_passthrough_on_success() -> None:
    called: list[object] = []
    result = await Future.of(4).map_err(called.append).to_result()
    assert result == Success(4)
    assert called == []


@pytest.mark.asyncio
async def test_map_err_on_failure() -> None:
    assert await Future.reject(ValueError("test")).map_err(lambda _: 8).swap() == 8


@pytest.mark.asyncio
async def test_map_catches_exception() -> None:
    error = ZeroDivisionError("boom")

    def explode(_: int) -> int:
        raise error

    assert await Future.of(1).map(explode).to_result() == Failure(error)


@pytest.mark.asyncio
async def test_map_identity() -> None:
    for future in (Future.of(3), Future.reject("e")):
        assert await future.map(lambda x: x).to_result() == await future.to_result()


@pytest.mark.asyncio
async def test_map_composition() -> None:
    g = lambda x: x + 1  # noqa: E731
    h = lambda x: x * 10  # noqa: E731
    future = Future.of(2)
    assert await future.map(g).map(h).to_result() == await future.map(lambda x: h(g(x))).to_result()


# =============================================================================
# flat_map / flat_map_err
# =============================================================================


@pytest.mark.asyncio
async def test_flat_map_chains_on_success() -> None:
    assert await Future.of(4).flat_map(lambda n: Future.of(n * 2)) == 8


@pytest.mark.asyncio
async def test_flat_map_short_circuits_on_failure() -> None:
    called: list[object] = []

    def next_step(value: object) -> Future[object, object]:
        called.append(value)
        return Future.of(value)

    assert await Future.reject("e").flat_map(next_step).to_result() == Failure("e")
    assert called == []


@pytest.mark.asyncio
async def test_flat_map_err_recovers() -> None:
    assert await Future.reject(ValueError("test")).flat_map_err(lambda _: Future.of(4)) == 4


@pytest.mark.asyncio
async def test_flat_map_err_can_fail_again() -> None:
    future = Future.reject(ValueError("test")).flat_map_err(lambda _: Future.reject(ValueError("again")))
    assert await future.await_or_else(10) == 10


@pytest.mark.asyncio
async def test_flat_map_err_passthrough_on_success() -> None:
    assert await Future.of("test").flat_map_err(lambda _: Future.of(4)) == "test"


@pytest.mark.asyncio
async def test_flat_map_err_catches_exception() -> None:
    def explode(_: object) -> Future[int, object]:
        raise RuntimeError("neiiin")

    assert await Future.reject(ValueError("test")).flat_map_err(explode).await_or_else(10) == 10


@pytest.mark.asyncio
async def test_flat_map_catches_exception() -> None:
    def explode(_: object) -> Future[int, object]:
        raise RuntimeError("neiiin")

    outcome = await Future.of("test").flat_map(explode).to_result()
    assert isinstance(outcome.extract(), RuntimeError)


@pytest.mark.asyncio
async def test_flat_map_rejects_non_future() -> None:
    outcome = await Future.of(1).flat_map(lambda x: x + 1).to_result()
    assert isinstance(outcome.extract(), TypeError)


@pytest.mark.asyncio
async def test_parent_is_not_mutated() -> None:
    parent = Future.of(1)
    child = parent.map(lambda x: x + 1)
    assert await parent == 1
    assert await child == 2


# =============================================================================
# swap / match family / tap
# =============================================================================


@pytest.mark.asyncio
async def test_swap() -> None:
    assert await Future.of(1).swap().to_result() == Failure(1)
    assert await Future.reject("e").swap().to_result() == Success("e")


@pytest.mark.asyncio
async def test_swap_involution() -> None:
    for future in (Future.of(3), Future.reject("e")):
        assert await future.swap().swap().to_result() == await future.to_result()


@pytest.mark.asyncio
async def test_match_on_success() -> None:
    future = Future.of("ok").match(on_success=lambda v: v.upper(), on_failure=lambda e: "bad")
    assert await future.to_result() == Success("OK")


@pytest.mark.asyncio
async def test_match_on_failure_succeeds() -> None:
    future = Future.reject("test").match(on_success=lambda v: "good", on_failure=lambda e: e * 2)
    assert await future.to_result() == Success("testtest")


@pytest.mark.asyncio
async def test_match_err_always_fails() -> None:
    future = Future.of(1).match_err(on_success=lambda v: f"was {v}", on_failure=str)
    assert await future.to_result() == Failure("was 1")


@pytest.mark.asyncio
async def test_match_handler_exception_is_failure() -> None:
    def explode(_: object) -> object:
        raise LookupError("handler")

    outcome = await Future.of(1).match(on_success=explode, on_failure=str).to_result()
    assert isinstance(outcome.extract(), LookupError)


@pytest.mark.asyncio
async def test_flat_match_on_success() -> None:
    def explode(e: object) -> Future[int, object]:
        raise AssertionError("must not be called")

    future = Future.of("ok").flat_match(on_success=lambda _: Future.of(4), on_failure=explode)
    assert await future == 4


@pytest.mark.asyncio
async def test_flat_match_on_failure() -> None:
    future = Future.reject("nada").flat_match(
        on_success=Future.of,
        on_failure=lambda _: Future.reject("nein"),
    )
    assert await future.to_result() == Failure("nein")


@pytest.mark.asyncio
async def test_flat_match_err() -> None:
    future = Future.of(2).flat_match_err(
        on_success=lambda v: Future.reject(f"got {v}"),
        on_failure=lambda e: Future.reject(e),
    )
    assert await future.to_result() == Failure("got 2")


@pytest.mark.asyncio
async def test_tap_observes_success_only() -> None:
    seen: list[object] = []
    assert await Future.of(1).tap(seen.append) == 1
    assert await Future.reject("e").tap(seen.append).to_result() == Failure("e")
    assert seen == [1]


@pytest.mark.asyncio
async def test_tap_err_observes_failure_only() -> None:
    seen: list[object] = []
    assert await Future.reject("e").tap_err(seen.append).to_result() == Failure("e")
    assert await Future.of(1).tap_err(seen.append) == 1
    assert seen == ["e"]


@pytest.mark.asyncio
async def test_tap_exception_becomes_failure() -> None:
    error = RuntimeError("tap")

    def explode(_: object) -> None:
        raise error

    assert await Future.of(1).tap(explode).to_result() == Failure(error)
    assert await Future.reject("e").tap_err(explode).to_result() == Failure(error)


# =============================================================================
# Conversions
# =============================================================================


@pytest.mark.asyncio
async def test_to_option() -> None:
    assert await Future.of(4).to_option() == Present(4)
    assert await Future.reject("test").to_option() == Empty()


@pytest.mark.asyncio
async def test_to_result() -> None:
    error = ValueError("e")
    assert await Future.of(4).to_result() == Success(4)
    assert await Future.reject(error).to_result() == Failure(error)


# =============================================================================
# from_awaitable
# =============================================================================


@pytest.mark.asyncio
async def test_from_awaitable_factory_is_lazy() -> None:
    runs: list[int] = []

    async def work() -> int:
        runs.append(1)
        return len(runs)

    future = Future.from_awaitable(work)
    await asyncio.sleep(0.01)
    assert runs == []
    assert await future == 1
    assert await future == 2


@pytest.mark.asyncio
async def test_from_awaitable_coroutine_is_shared() -> None:
    runs: list[int] = []

    async def work() -> int:
        runs.append(1)
        return 4

    future = Future.from_awaitable(work())
    assert await future.await_or_else(10) == 4
    assert await future.await_or_else(10) == 4
    assert runs == [1]


@pytest.mark.asyncio
async def test_from_awaitable_maps_errors() -> None:
    async def kill() -> int:
        raise ValueError("Kill")

    future = Future.from_awaitable(kill, mapper=str)
    with pytest.raises(RejectedError) as info:
        await future
    assert info.value.error == "Kill"


@pytest.mark.asyncio
async def test_from_awaitable_mapper_failure_is_failure() -> None:
    async def kill() -> int:
        raise ValueError("Kill")

    def bad_mapper(exc: BaseException) -> str:
        raise TypeError("mapper")

    outcome = await Future.from_awaitable(kill, mapper=bad_mapper).to_result()
    assert isinstance(outcome.extract(), TypeError)


@pytest.mark.asyncio
async def test_from_awaitable_cancel_cancels_task() -> None:
    finished: list[bool] = []
    seen: list[object] = []

    async def slow() -> int:
        await asyncio.sleep(0.05)
        finished.append(True)
        return 1

    cancel = Future.from_awaitable(slow).extract(seen.append, seen.append)
    assert cancel() is True
    await asyncio.sleep(0.1)
    assert finished == []
    assert seen == []


@pytest.mark.asyncio
async def test_lazy_wraps_result_coroutine() -> None:
    async def run():
        return failure("nope")

    assert await Future.lazy(run).to_result() == Failure("nope")


# =============================================================================
# Cancellation
# =============================================================================


@pytest.mark.asyncio
async def test_cancel_suppresses_delayed_settlement() -> None:
    seen: list[object] = []

    def action(resolve, reject):
        # ignores cancellation on purpose
        asyncio.get_running_loop().call_later(0.02, resolve, 1)
        return lambda: True

    cancel = Future(action).extract(seen.append, seen.append)
    cancel()
    await asyncio.sleep(0.05)
    assert seen == []


@pytest.mark.asyncio
async def test_cancel_timer_future() -> None:
    seen: list[object] = []
    cancel = Future.after(0.02, 1).extract(seen.append, seen.append)
    assert cancel() is True
    await asyncio.sleep(0.05)
    assert seen == []


def test_of_cancel_hook_runs(counter) -> None:
    seen: list[object] = []
    cancel = Future.of(4, counter).extract(seen.append, pytest.fail)
    assert cancel() is True
    assert counter.calls == 1
    assert seen == [4]


def test_reject_cancel_hook_runs(counter) -> None:
    seen: list[object] = []
    cancel = Future.reject(4, counter).extract(pytest.fail, seen.append)
    cancel()
    assert counter.calls == 1
    assert seen == [4]


def test_cancel_reports_action_answer(never_settles, counter) -> None:
    counter.answer = False
    assert never_settles(counter).extract(pytest.fail, pytest.fail)() is False


@pytest.mark.asyncio
async def test_cancel_reaches_chained_stage(counter, never_settles) -> None:
    seen: list[object] = []
    chained = Future.of(1).flat_map(lambda _: never_settles(counter))
    cancel = chained.extract(seen.append, seen.append)
    cancel()
    assert counter.calls == 1
    assert seen == []


@pytest.mark.asyncio
async def test_cancel_chain_before_parent_settles() -> None:
    seen: list[object] = []
    started: list[object] = []

    def follow(value: int) -> Future[int, object]:
        started.append(value)
        return Future.of(value)

    cancel = Future.after(0.02, 1).flat_map(follow).extract(seen.append, seen.append)
    cancel()
    await asyncio.sleep(0.05)
    assert started == []
    assert seen == []


# =============================================================================
# Raising actions inside chains
# =============================================================================


def _broken(resolve, reject):
    raise ValueError("action raised")


def test_extract_turns_raising_action_into_failure() -> None:
    failures: list[object] = []
    cancel = Future(_broken).extract(pytest.fail, failures.append)
    assert [type(error) for error in failures] == [ValueError]
    assert cancel() is True


def test_extract_reraises_after_settlement() -> None:
    def settles_then_raises(resolve, reject):
        resolve(1)
        raise RuntimeError("after resolve")

    with pytest.raises(RuntimeError):
        Future(settles_then_raises).extract(lambda _: None, pytest.fail)


@pytest.mark.asyncio
async def test_flat_map_into_raising_action_after_async_parent() -> None:
    chained = Future.from_awaitable(lambda: asyncio.sleep(0, 1)).flat_map(lambda _: Future(_broken))
    outcome = await asyncio.wait_for(chained.to_result(), timeout=1.0)
    assert isinstance(outcome.extract(), ValueError)


@pytest.mark.asyncio
async def test_flat_map_into_raising_factory() -> None:
    def factory():
        raise LookupError("no such resource")

    chained = Future.after(0.0, 1).flat_map(lambda _: Future.from_awaitable(factory))
    outcome = await asyncio.wait_for(chained.to_result(), timeout=1.0)
    assert isinstance(outcome.extract(), LookupError)


@pytest.mark.asyncio
async def test_flat_map_err_into_raising_action() -> None:
    chained = Future.after(0.0, "e").swap().flat_map_err(lambda _: Future(_broken))
    with pytest.raises(ValueError, match="action raised"):
        await asyncio.wait_for(chained.await_(), timeout=1.0)


# =============================================================================
# Long chains
# =============================================================================


def test_long_sync_map_chain() -> None:
    future = Future.of(0)
    for _ in range(10_000):
        future = future.map(lambda n: n + 1)

    seen: list[object] = []
    future.extract(seen.append, pytest.fail)
    assert seen == [10_000]


@pytest.mark.asyncio
async def test_long_map_chain_on_async_root() -> None:
    future = Future.after(0.0, 0)
    for _ in range(10_000):
        future = future.map(lambda n: n + 1)
    assert await future == 10_000


@pytest.mark.asyncio
async def test_deeply_nested_flat_map() -> None:
    def countdown(n: int) -> Future[int, object]:
        if n == 0:
            return Future.of("done")
        return Future.of(n - 1).flat_map(countdown)

    assert await countdown(10_000) == "done"


def test_long_chain_short_circuits_and_recovers() -> None:
    future = Future.reject("boom")
    for _ in range(10_000):
        future = future.map(lambda n: n + 1)
    future = future.flat_map_err(lambda error: Future.of(f"recovered {error}"))

    seen: list[object] = []
    future.extract(seen.append, pytest.fail)
    assert seen == ["recovered boom"]


def test_chained_future_repr() -> None:
    assert repr(Future.of(1).map(str).map(len)).endswith(".chain(2 stages)")
