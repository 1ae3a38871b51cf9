"""
Core type definitions for resultkit.

Aliases shared by the containers, the Future engine and the combinators.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

# ============================================================================
# Callback protocol of a Future action
# ============================================================================

# Resolve = success callback handed to an action
type Resolve[T] = Callable[[T], None]

# Reject = failure callback handed to an action
type Reject[E] = Callable[[E], None]

# Cancel = function returned by an action; True means "cancellation accepted"
type Cancel = Callable[[], bool]

# Action = the deferred computation a Future owns
type Action[T, E] = Callable[[Resolve[T], Reject[E]], Cancel]

# ============================================================================
# General aliases
# ============================================================================

# NoError = failure channel of a computation that never fails
# NOTE: Never (bottom type) instead of None: the value cannot be produced at all.
type NoError = typing.Never

__all__ = (
    "Action",
    "Cancel",
    "NoError",
    "Reject",
    "Resolve",
)
