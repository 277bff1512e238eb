"""Core utilities for psstat."""

from __future__ import annotations

from .config import CACHE, READER, CacheConfig, ReaderConfig, RunConfig
from .errors import (
    ConfigurationError,
    EnumerationError,
    MemoryInfoError,
    ParseError,
    PsstatError,
    StoreWriteError,
)

__all__ = [
    "CACHE",
    "READER",
    "CacheConfig",
    "ConfigurationError",
    "EnumerationError",
    "MemoryInfoError",
    "ParseError",
    "PsstatError",
    "ReaderConfig",
    "RunConfig",
    "StoreWriteError",
]
