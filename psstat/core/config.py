"""Global configuration values for psstat."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import psutil

MEASUREMENT = "psstat"

# Scheduler ticks per second used by /proc/<pid>/stat on Linux.
CLOCK_TICKS = 100
PAGE_SIZE = os.sysconf("SC_PAGE_SIZE") if hasattr(os, "sysconf") else 4096
PROC_ROOT = Path(getattr(psutil, "PROCFS_PATH", "/proc"))

DEFAULT_CACHE_DIR = Path("/tmp")
DEFAULT_CACHE_NAME = "psstat"


@dataclass(frozen=True)
class ReaderConfig:
    """How the process table is enumerated."""

    proc_root: Path = PROC_ROOT
    concurrent: bool = False
    max_workers: int = 4  # more threads cause load spikes on busy hosts
    clock_ticks: int = CLOCK_TICKS
    page_size: int = PAGE_SIZE


@dataclass(frozen=True)
class CacheConfig:
    """Location of the snapshot cache file."""

    directory: Path = DEFAULT_CACHE_DIR
    name: str = DEFAULT_CACHE_NAME

    @property
    def path(self) -> Path:
        return self.directory / self.name


@dataclass(frozen=True)
class RunConfig:
    """Everything a single invocation needs, built once from the command line."""

    pids: tuple[str, ...] = ()
    pid_files: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()
    systemd_units: tuple[str, ...] = ()
    tags: tuple[tuple[str, str], ...] = ()
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


READER = ReaderConfig()
CACHE = CacheConfig()
