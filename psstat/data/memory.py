"""Memory data collection."""

from __future__ import annotations

import psutil

from psstat.core.errors import MemoryInfoError


def total_memory() -> int:
    """Return total system memory in bytes."""

    try:
        mem = psutil.virtual_memory()
    except (OSError, RuntimeError) as exc:
        raise MemoryInfoError(f"cannot read system memory: {exc}") from exc
    return int(mem.total)
