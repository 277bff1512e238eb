"""Exceptions raised by psstat."""

from __future__ import annotations


class PsstatError(Exception):
    """Base class for every psstat failure."""


class EnumerationError(PsstatError):
    """The process root could not be listed; the run cannot continue."""


class ParseError(PsstatError):
    """A single process record was unreadable or malformed."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"pid {pid}: {reason}")
        self.pid = pid
        self.reason = reason


class StoreWriteError(PsstatError):
    """The snapshot cache could not be written."""


class MemoryInfoError(PsstatError):
    """Total system memory could not be determined."""


class ConfigurationError(PsstatError):
    """Invalid command line input."""
