"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory scanning, candidate matching and the outbound group messages.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, Tuple
import logging
import os
from enum import Enum

from dupescan.core.errors import ConfigError
from dupescan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class ScanState(Enum):
    """
    Lifecycle of a single DupeScanner invocation.
    IDLE → SCANNING → MATCHING → DONE, DONE is terminal.
    """
    IDLE = "idle"
    SCANNING = "scanning"
    MATCHING = "matching"
    DONE = "done"

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """A regular file found by the directory walk."""
    path: str
    size: int  # in bytes

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class Fingerprint:
    """
    Cached result of a fingerprint computation.
    Holds either the digest or the OSError raised while reading the stream.
    An absent Fingerprint (None) means "not computed yet".
    """
    value: Optional[bytes] = None
    error: Optional[OSError] = None

    def unwrap(self) -> bytes:
        """Return the digest or re-raise the cached read failure."""
        if self.error is not None:
            raise self.error
        return self.value


@dataclass(frozen=True)
class DuplicateGroupMessage:
    """
    One finished group of identical files, as handed to a receiver.

    group_index / total_groups_in_batch: position inside the bucket's emitted groups (1-based).
    bucket_index / bucket_count: position of the bucket inside the whole scan (1-based),
    lets a receiver show progress before the scan has finished.
    """
    size: int
    total_groups_in_batch: int
    group_index: int
    filenames: Tuple[str, ...]
    comparator: str = "exact"
    bucket_index: int = 1
    bucket_count: int = 1

    @property
    def duplicate_count(self) -> int:
        return len(self.filenames)

    @property
    def wasted_bytes(self) -> int:
        """Bytes that would be freed by keeping only one copy."""
        return self.size * (len(self.filenames) - 1)

    def __repr__(self):
        return (f"<DuplicateGroupMessage size={self.size}, count={len(self.filenames)}, "
                f"group={self.group_index}/{self.total_groups_in_batch}>")


@dataclass(frozen=True)
class EndOfScan:
    """Terminal sentinel sent once after the last DuplicateGroupMessage."""
    stats: Optional["ScanStats"] = None
    cancelled: bool = False


class ScanStats:
    """
    Counters collected during one scan invocation.
    Replaces process-wide counters: each DupeScanner owns its own instance.
    """
    COUNTERS = (
        "files_found",
        "buckets",
        "candidates",
        "partial_fingerprints",
        "full_fingerprints",
        "byte_comparisons",
        "io_errors",
        "walk_errors",
        "groups_emitted",
    )

    def __init__(self):
        self.files_found: int = 0
        self.buckets: int = 0
        self.candidates: int = 0
        self.partial_fingerprints: int = 0
        self.full_fingerprints: int = 0
        self.byte_comparisons: int = 0
        self.io_errors: int = 0
        self.walk_errors: int = 0
        self.groups_emitted: int = 0
        self.walk_time: float = 0.0
        self.match_time: float = 0.0
        self.total_time: float = 0.0
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener notified on every state change of the scanner."""
        self._listeners.append(listener)

    def increment(self, counter: str, amount: int = 1) -> None:
        if counter not in self.COUNTERS:
            raise KeyError(f"Unknown counter: {counter}")
        setattr(self, counter, getattr(self, counter) + amount)

    def notify(self, event: str, data: Optional[Dict] = None) -> None:
        payload = data if data is not None else self.as_dict()
        for listener in self._listeners:
            try:
                listener(event, payload)
            except Exception:
                logger.exception("Error in stats event handler for %s", event)

    def as_dict(self) -> Dict[str, Union[int, float]]:
        result: Dict[str, Union[int, float]] = {name: getattr(self, name) for name in self.COUNTERS}
        result["walk_time"] = self.walk_time
        result["match_time"] = self.match_time
        result["total_time"] = self.total_time
        return result

    def print_summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Walk: {self.files_found} files in {self.walk_time:.3f}s ({self.walk_errors} errors)",
            f"Match: {self.buckets} buckets / {self.candidates} candidates in {self.match_time:.3f}s",
            f"Fingerprints: {self.partial_fingerprints} partial / {self.full_fingerprints} full",
            f"Byte comparisons: {self.byte_comparisons}",
            f"I/O errors: {self.io_errors}",
            f"Groups emitted: {self.groups_emitted}",
        ]
        return "\n".join(lines)

    def __repr__(self):
        return f"<ScanStats files={self.files_found}, groups={self.groups_emitted}>"


# ======================
#  Scan parameters (CLI and API)
# ======================

@dataclass
class ScanParams:
    """Parameters for one scan with validation."""
    roots: List[str]
    recursive: bool = True
    min_size_bytes: int = 0
    include_empty: bool = False
    comparators: List[str] = field(default_factory=lambda: ["exact"])
    excluded_dirs: List[str] = field(default_factory=list)
    channel_capacity: int = 64

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.roots, str):
            self.roots = [self.roots]
        if not self.roots:
            raise ConfigError("At least one root directory is required")

        for root in self.roots:
            if not root:
                raise ConfigError("Root directory cannot be empty")
            if not os.path.exists(root):
                raise ConfigError(f"Directory does not exist: {root}")
            if not os.path.isdir(root):
                raise ConfigError(f"Not a directory: {root}")

        if self.min_size_bytes < 0:
            raise ConfigError("Minimum size cannot be negative")

        if self.channel_capacity < 1:
            raise ConfigError("Channel capacity must be at least 1")

        names = [name.strip().lower() for name in self.comparators if name and name.strip()]
        if not names:
            raise ConfigError("At least one comparator must be enabled")
        if len(set(names)) != len(names):
            raise ConfigError(f"Comparator listed more than once: {', '.join(names)}")
        self.comparators = names

    @property
    def effective_min_size(self) -> int:
        """Smallest file size the walker accepts."""
        if self.include_empty:
            return self.min_size_bytes
        return max(self.min_size_bytes, 1)

    @staticmethod
    def from_human_readable(
            roots: List[str],
            min_size_str: str = "0",
            recursive: bool = True,
            include_empty: bool = False,
            comparators: Optional[List[str]] = None,
            excluded_dirs: Optional[List[str]] = None,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        try:
            min_size = ConvertUtils.human_to_bytes(min_size_str)
        except ValueError as e:
            raise ConfigError(f"Invalid size format: {e}") from e

        return ScanParams(
            roots=list(roots),
            recursive=recursive,
            min_size_bytes=min_size,
            include_empty=include_empty,
            comparators=comparators or ["exact"],
            excluded_dirs=excluded_dirs or [],
        )
