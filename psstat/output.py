"""Line protocol output."""

from __future__ import annotations

import re
from typing import Iterable

from psstat.core.config import MEASUREMENT
from psstat.core.errors import ConfigurationError
from psstat.models import Measurement

_SPECIAL = re.compile(r"([\s=,])")


def escape(value: str) -> str:
    """Backslash-escape whitespace, ``=`` and ``,``."""

    return _SPECIAL.sub(r"\\\1", value)


def parse_tags(values: Iterable[str]) -> tuple[tuple[str, str], ...]:
    tags: dict[str, str] = {}
    for value in values:
        key, sep, tag_value = value.partition("=")
        if not sep:
            raise ConfigurationError(f"Provided tag must look like name=value: {value!r}")
        tags[key] = tag_value
    return tuple(tags.items())


def format_tags(tags: Iterable[tuple[str, str]]) -> str:
    return "".join(f",{key}={value}" for key, value in tags)


def format_line(
    measurement: Measurement,
    name: str,
    tags: Iterable[tuple[str, str]] = (),
    measurement_name: str = MEASUREMENT,
) -> str:
    return "%s%s,process_name=%s pcpu=%.3f,pmem=%.3f,n_proc=%di" % (
        measurement_name,
        format_tags(tags),
        escape(name),
        measurement.cpu_percent,
        measurement.mem_percent,
        measurement.process_count,
    )
