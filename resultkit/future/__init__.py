"""
Future
======

Lazy, cancellable asynchronous success/failure container.
"""

from .core import Future
from .settlement import Settlement

__all__ = (
    "Future",
    "Settlement",
)
