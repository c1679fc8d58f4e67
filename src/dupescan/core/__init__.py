"""
Core duplicate detection engine — walker, comparators, fingerprinting, grouping and scanner.

This package contains the performance-critical foundation of dupescan:
- DirectoryWalker: per-root traversal with size filter, symlinks and trash skipped
- ExactComparator / JsonComparator + ComparatorRegistry: pluggable notions of "identical"
- Fingerprinter + XXHashAlgorithmImpl: xxHash64 partial/full fingerprints, byte comparison
- CandidateGroup / FileGrouperImpl: bucketing and incremental matching
- DupeScanner: concurrent walk, size-ordered matching, results streamed to a channel
- Models: FileRecord, DuplicateGroupMessage, EndOfScan, ScanParams, ScanStats

All components are pure Python with no UI dependencies — suitable for CLI and library usage.
"""

from .errors import DupeScanError, WalkError, ConfigError, ChannelError
from .models import (
    FileRecord, Fingerprint, DuplicateGroupMessage, EndOfScan,
    ScanParams, ScanState, ScanStats)
from .comparators import ExactComparator, JsonComparator, ComparatorRegistry, default_registry
from .hasher import Fingerprinter, XXHashAlgorithmImpl, streams_equal, BLOCK_SIZE
from .group import CandidateGroup
from .grouper import FileGrouperImpl
from .walker import DirectoryWalker
from .channel import DuplicateGroupChannel
from .scanner import DupeScanner

__all__ = [
    "DupeScanError",
    "WalkError",
    "ConfigError",
    "ChannelError",
    "FileRecord",
    "Fingerprint",
    "DuplicateGroupMessage",
    "EndOfScan",
    "ScanParams",
    "ScanState",
    "ScanStats",
    "ExactComparator",
    "JsonComparator",
    "ComparatorRegistry",
    "default_registry",
    "Fingerprinter",
    "XXHashAlgorithmImpl",
    "streams_equal",
    "BLOCK_SIZE",
    "CandidateGroup",
    "FileGrouperImpl",
    "DirectoryWalker",
    "DuplicateGroupChannel",
    "DupeScanner",
]
