from .parallel import all_, all_safe
from .policy import ParallelPolicy
from .sequential import seq, seq_safe

__all__ = (
    # Policy
    "ParallelPolicy",
    # Sequential
    "seq",
    "seq_safe",
    # Parallel
    "all_",
    "all_safe",
)
