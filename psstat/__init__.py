"""psstat: rolled-up process resource usage from procfs."""

from __future__ import annotations

__version__ = "0.4.0"

__all__ = [
    "Aggregate",
    "Process",
    "Snapshot",
    "SnapshotCache",
    "enumerate_processes",
    "parse_one",
    "sum_resources",
]

from .aggregate import sum_resources  # noqa: E402
from .cache import SnapshotCache  # noqa: E402
from .data import enumerate_processes, parse_one  # noqa: E402
from .models import Aggregate, Process, Snapshot  # noqa: E402
