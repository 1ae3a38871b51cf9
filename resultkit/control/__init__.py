from .run import bind, run

__all__ = (
    "bind",
    "run",
)
