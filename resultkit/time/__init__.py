from .delay import after, delay

__all__ = (
    "after",
    "delay",
)
