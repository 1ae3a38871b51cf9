"""
resultkit: explicit result types for sync and async Python.

Three containers replacing None checks, exception-driven control flow and
eager task chains:

- Option   (Present / Empty): a value or nothing
- Result   (Success / Failure): a success value or a failure value
- Future   lazy, cancellable async computation with both channels

Architecture:
- option / result: immutable tagged unions, matched with ``match``
- future: the Future engine (action + settlement guard + transformations)
- concurrency: seq / seq_safe / all_ / all_safe list combinators
- control: generator runner (run + bind)
- time: timer-backed Futures (after, delay)
- interop: bridges to other libraries (imported explicitly)
"""

# Core types
from ._types import Action, Cancel, NoError, Reject, Resolve

# Internal helpers (for custom actions)
from . import _helpers

# Containers
from .option import Empty, Option, Present, empty, present
from .result import Failure, Result, Success, failure, success

# Future
from .future import Future, Settlement

# Concurrency
from .concurrency import ParallelPolicy, all_, all_safe, seq, seq_safe

# Control flow
from .control import bind, run

# Time
from .time import after, delay

# Errors
from ._errors import RejectedError, UnwrapError

__all__ = (
    # Types
    "Action",
    "Cancel",
    "NoError",
    "Reject",
    "Resolve",
    # Internal helpers (for custom actions)
    "_helpers",
    # Option
    "Empty",
    "Option",
    "Present",
    "empty",
    "present",
    # Result
    "Failure",
    "Result",
    "Success",
    "failure",
    "success",
    # Future
    "Future",
    "Settlement",
    # Concurrency
    "ParallelPolicy",
    "all_",
    "all_safe",
    "seq",
    "seq_safe",
    # Control
    "bind",
    "run",
    # Time
    "after",
    "delay",
    # Errors
    "RejectedError",
    "UnwrapError",
)
