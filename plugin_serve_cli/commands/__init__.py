"""CLI command modules."""

from . import serve, tasks

__all__ = [
    "serve",
    "tasks",
]
