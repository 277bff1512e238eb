"""Process data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Process:
    pid: int
    name: str = ""
    parent: int = 0
    user_time: float = 0.0
    system_time: float = 0.0
    memory_used: int = 0

    @property
    def cpu_time(self) -> float:
        return self.user_time + self.system_time


@dataclass(slots=True)
class Snapshot:
    """All processes visible at ``captured_at`` (nanoseconds since the epoch)."""

    captured_at: int = 0
    processes: dict[int, Process] = field(default_factory=dict)

    def __contains__(self, pid: object) -> bool:
        return pid in self.processes

    def pids(self) -> set[int]:
        return set(self.processes)


@dataclass(frozen=True, slots=True)
class Aggregate:
    """Rolled-up usage of a process and every descendant."""

    cpu_seconds: float
    memory_bytes: int
    process_count: int = 1


@dataclass(frozen=True, slots=True)
class Measurement:
    pid: int
    cpu_percent: float
    mem_percent: float
    process_count: int
