"""Models exported by psstat."""

from .process import Aggregate, Measurement, Process, Snapshot

__all__ = [
    "Aggregate",
    "Measurement",
    "Process",
    "Snapshot",
]
