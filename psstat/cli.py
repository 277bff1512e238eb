"""psstat, gather resource usage of processes.

One invocation reads the process table, compares it with the snapshot cached
by the previous invocation and prints one line per selected process::

    psstat --pid kernel:1
    psstat --pid-file /var/run/nginx.pid
    psstat --pattern mysqld:mysqld_safe --tag env=production

When a ``<name>:`` prefix is given it is used as the ``process_name`` tag,
otherwise the name is taken from the process itself.
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import Sequence, TextIO

import psutil

from psstat import __version__
from psstat.cache import SnapshotCache
from psstat.core.config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_NAME,
    PROC_ROOT,
    CacheConfig,
    ReaderConfig,
    RunConfig,
)
from psstat.core.errors import ConfigurationError, EnumerationError, MemoryInfoError, StoreWriteError
from psstat.core.logging import setup_logger
from psstat.data import enumerate_processes, resolve_targets, total_memory
from psstat.output import format_line, parse_tags
from psstat.rates import measure

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psstat",
        description="Gather resource usage of processes and their children.",
    )
    parser.add_argument("--pid", action="append", default=[], metavar="[NAME:]PID",
                        help="PID of the process to gather stats of")
    parser.add_argument("--pid-file", action="append", default=[], metavar="[NAME:]FILE",
                        help="file containing a PID of a process to gather stats of")
    parser.add_argument("--pattern", action="append", default=[], metavar="[NAME:]PATTERN",
                        help="pattern to find processes with (all matches are used)")
    parser.add_argument("--systemd", action="append", default=[], metavar="[NAME:]UNIT",
                        help="systemd unit pattern to find processes with (all matches are used)")
    parser.add_argument("--tag", action="append", default=[], metavar="NAME=VALUE",
                        help="add a tag to the output (for example: env=production)")
    parser.add_argument("--cache-dir", type=Path, default=DEFAULT_CACHE_DIR,
                        help="directory to store the stats cache in (default: %(default)s)")
    parser.add_argument("--cache-name", default=DEFAULT_CACHE_NAME,
                        help="name of the stats cache file in cache-dir (default: %(default)s)")
    parser.add_argument("--multi-threaded", action="store_true",
                        help="read the process table with a thread pool")
    parser.add_argument("--proc-root", type=Path, default=PROC_ROOT, help=argparse.SUPPRESS)
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="diagnostics written to stderr (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        pids=tuple(args.pid),
        pid_files=tuple(args.pid_file),
        patterns=tuple(args.pattern),
        systemd_units=tuple(args.systemd),
        tags=parse_tags(args.tag),
        reader=ReaderConfig(proc_root=args.proc_root, concurrent=args.multi_threaded),
        cache=CacheConfig(directory=args.cache_dir, name=args.cache_name),
    )


def run(
    config: RunConfig,
    stream: TextIO = sys.stdout,
    core_count: int | None = None,
    runner=subprocess.run,
) -> int:
    """Take one sample and print a line per resolved target. Returns an exit code."""

    cores = core_count or psutil.cpu_count(logical=True) or 1

    try:
        mem_total = total_memory()
    except MemoryInfoError as exc:
        logger.error("Failed to gather total memory: %s", exc)
        return 1

    try:
        current = enumerate_processes(config.reader)
    except EnumerationError as exc:
        logger.error("Failed to gather process information: %s", exc)
        return 1

    targets = resolve_targets(
        current.processes,
        pids=config.pids,
        pid_files=config.pid_files,
        patterns=config.patterns,
        systemd_units=config.systemd_units,
        runner=runner,
    )

    cache = SnapshotCache(config.cache.path)
    previous = cache.load(current.pids())
    try:
        cache.save(current)
    except StoreWriteError as exc:
        logger.error("%s", exc)

    for pid, name in targets.items():
        process = current.processes.get(pid)
        if process is None:
            logger.info("Process %d not found, skipping", pid)
            continue
        measurement = measure(pid, current, previous, mem_total, cores)
        print(format_line(measurement, name or process.name, config.tags), file=stream)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(level=getattr(logging, args.log_level))
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
