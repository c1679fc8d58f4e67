"""
dupescan — find duplicate files under one or more directories.

Core features:
- Concurrent directory walk, one worker per root
- Size → partial fingerprint → full fingerprint → byte comparison (xxHash64 filters, bytes decide)
- Pluggable comparators: exact bytes, canonical JSON
- Results streamed largest files first to a receiver (listing, prompt, keep-one)
- Safe deletion to system trash (via send2trash)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupescan")
except Exception:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dupescan.commands import DuplicateScanCommand, find_duplicates
from dupescan.core import (
    ScanParams, ScanStats, DuplicateGroupMessage, EndOfScan, DupeScanner,
    DuplicateGroupChannel, ComparatorRegistry, ExactComparator, JsonComparator,
    DupeScanError, ConfigError, ChannelError, WalkError)
from dupescan.utils.convert_utils import ConvertUtils
from dupescan.services import DuplicateService
from dupescan.services.file_service import FileService

__all__ = [
    "DuplicateScanCommand",
    "find_duplicates",
    "ScanParams",
    "ScanStats",
    "DuplicateGroupMessage",
    "EndOfScan",
    "DupeScanner",
    "DuplicateGroupChannel",
    "ComparatorRegistry",
    "ExactComparator",
    "JsonComparator",
    "DupeScanError",
    "ConfigError",
    "ChannelError",
    "WalkError",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]
