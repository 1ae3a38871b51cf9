"""Pytest configuration and fixtures.

Test doubles for Future actions: a Future that never settles and records
cancellation, and a stopwatch for timing properties.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from resultkit import Future

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CancelCounter:
    """Counts how many times a cancel function was called."""

    calls: int = 0
    answer: bool = True

    def __call__(self) -> bool:
        self.calls += 1
        return self.answer


@dataclass
class Stopwatch:
    """Seconds elapsed since creation, plus named marks."""

    started: float = field(default_factory=time.monotonic)
    marks: dict[object, float] = field(default_factory=dict)

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def mark(self, key: object) -> None:
        self.marks[key] = self.elapsed()


@pytest.fixture
def counter() -> CancelCounter:
    return CancelCounter()


@pytest.fixture
def stopwatch() -> Stopwatch:
    return Stopwatch()


@pytest.fixture
def never_settles() -> Callable[[CancelCounter], Future[object, object]]:
    """Factory of Futures whose action never calls back."""

    def make(counter: CancelCounter) -> Future[object, object]:
        return Future(lambda resolve, reject: counter)

    return make
