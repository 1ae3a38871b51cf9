from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParallelPolicy:
    """Configuration for all_/all_safe: batch size, whether to cancel on failure.

    ``limit=0`` starts every Future at once. ``limit=n`` runs consecutive
    batches of ``n``, each drained before the next one starts.
    """

    limit: int = 0
    cancel_pending: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise ValueError("ParallelPolicy.limit must be an int")
        if self.limit < 0:
            raise ValueError("ParallelPolicy.limit must be >= 0")


__all__ = ("ParallelPolicy",)
