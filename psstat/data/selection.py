"""Resolve command line target flags into PIDs.

Every flag value has the form ``[<name>:]<value>``. The optional name becomes
the ``process_name`` tag of the output line; when it is empty the name is
taken from the process itself. Each resolver adds ``pid -> name`` entries to
an accumulator, and a bad value is logged and skipped rather than aborting
the run.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Mapping

from psstat.models import Process

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def split_flag(value: str) -> tuple[str, str]:
    """Return ``(value, name)`` for a ``[name:]value`` flag."""

    if ":" not in value:
        return value, ""
    name, rest = value.split(":", 1)
    return rest, name


def pids_from_pid_flags(flags: Iterable[str], accumulator: dict[int, str]) -> None:
    for flag in flags:
        pid_str, name = split_flag(flag)
        try:
            pid = int(pid_str)
        except ValueError:
            logger.error("Invalid PID number provided: %r", pid_str)
            continue
        accumulator[pid] = name


def pids_from_pid_file_flags(flags: Iterable[str], accumulator: dict[int, str]) -> None:
    for flag in flags:
        pid_file, name = split_flag(flag)
        try:
            contents = Path(pid_file).read_text(encoding="utf-8")
        except OSError:
            logger.error("Could not read pidfile: %s", pid_file)
            continue
        try:
            pid = int(contents.strip())
        except ValueError:
            logger.error("Invalid PID in %s: %r", pid_file, contents.strip())
            continue
        accumulator[pid] = name


def pids_from_pattern_flags(
    flags: Iterable[str],
    accumulator: dict[int, str],
    processes: Mapping[int, Process],
) -> None:
    """Add every process whose name matches one of the patterns."""

    for flag in flags:
        pattern, name = split_flag(flag)
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            logger.error("Invalid pattern %r: %s", pattern, exc)
            continue
        for pid, process in processes.items():
            if regex.search(process.name):
                accumulator[pid] = name


def _systemctl(runner: Runner, *args: str) -> str | None:
    try:
        result = runner(
            ["systemctl", *args],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.error("systemctl %s failed: %s", " ".join(args), exc)
        return None
    return result.stdout


def _main_pid(output: str, unit: str) -> int | None:
    pid = 0
    for line in output.splitlines():
        if "=" not in line:
            continue
        value = line.split("=", 1)[1].strip()
        if not value or value == "0":
            continue
        try:
            pid = int(value)
        except ValueError:
            logger.error("Invalid PID from systemd unit %s: %r", unit, value)
            return None
    return pid


def pids_from_systemd_flags(
    flags: Iterable[str],
    accumulator: dict[int, str],
    runner: Runner = subprocess.run,
) -> None:
    """Add the main PID of every service unit matching each pattern."""

    for flag in flags:
        pattern, name = split_flag(flag)
        units = _systemctl(
            runner,
            "list-units",
            pattern,
            "--type=service",
            "--full",
            "--no-legend",
            "--no-pager",
            "--no-ask-password",
        )
        if not units:
            continue

        for line in units.splitlines():
            if not line.strip():
                continue
            unit = line.split()[0]
            output = _systemctl(runner, "show", unit, "--property=MainPID")
            if output is None:
                continue
            pid = _main_pid(output, unit)
            if pid:
                accumulator[pid] = name or unit.replace(".service", "")


def resolve_targets(
    processes: Mapping[int, Process],
    pids: Iterable[str] = (),
    pid_files: Iterable[str] = (),
    patterns: Iterable[str] = (),
    systemd_units: Iterable[str] = (),
    runner: Runner = subprocess.run,
) -> dict[int, str]:
    targets: dict[int, str] = {}
    pids_from_pid_flags(pids, targets)
    pids_from_pid_file_flags(pid_files, targets)
    pids_from_pattern_flags(patterns, targets, processes)
    pids_from_systemd_flags(systemd_units, targets, runner=runner)
    return targets
