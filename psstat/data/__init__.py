"""Data provider package."""

from .memory import total_memory
from .processes import enumerate_processes, parse_one
from .selection import resolve_targets

__all__ = [
    "enumerate_processes",
    "parse_one",
    "resolve_targets",
    "total_memory",
]
