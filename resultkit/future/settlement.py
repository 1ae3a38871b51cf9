"""
Settlement
==========

State of a single trigger of a Future.

A Future action receives ``resolve``/``reject`` and returns a cancel
function. ``Settlement`` sits between the action and the caller callbacks
and enforces the trigger contract:

- Pending -> Settled-Success | Settled-Failure: only the first settlement
  reaches the caller, later ones are dropped.
- Pending -> Cancelled: once cancelled, settlements are dropped.
- Cancelling after settlement changes nothing observable, the action's own
  cancel function is still called and its answer returned.
"""

from __future__ import annotations

import logging

from .._helpers import always_true
from .._types import Cancel, Reject, Resolve

log = logging.getLogger(__name__)


class Settlement[T, E]:
    """Guards the callbacks of one ``Future.extract`` call."""

    __slots__ = ("_on_success", "_on_failure", "_cancel", "_settled", "_cancelled")

    def __init__(self, on_success: Resolve[T], on_failure: Reject[E]) -> None:
        self._on_success = on_success
        self._on_failure = on_failure
        self._cancel: Cancel = always_true
        self._settled = False
        self._cancelled = False

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not (self._settled or self._cancelled)

    def bind(self, cancel: Cancel | None) -> None:
        """Attach the cancel function returned by the action."""
        # Actions written as plain functions often forget to return one.
        self._cancel = always_true if cancel is None else cancel

    def resolve(self, value: T) -> None:
        if self._drop("success", value):
            return
        self._settled = True
        self._on_success(value)

    def reject(self, error: E) -> None:
        if self._drop("failure", error):
            return
        self._settled = True
        self._on_failure(error)

    def cancel(self) -> bool:
        if self.pending:
            self._cancelled = True
        return bool(self._cancel())

    def _drop(self, channel: str, payload: object) -> bool:
        if self._settled:
            log.debug("Dropping %s %r: trigger already settled", channel, payload)
            return True
        if self._cancelled:
            log.debug("Dropping %s %r: trigger cancelled", channel, payload)
            return True
        return False


__all__ = ("Settlement",)
