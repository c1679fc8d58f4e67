"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate scanning engine.
These protocols enforce structural typing using Python's `typing.Protocol` so that
comparators, hash algorithms and receivers can be swapped without touching the scanner.

Key Components:
---------------
- ContentComparator: Named strategy deciding what "identical content" means.
- HashAlgorithm / HashState: Streaming checksum used for partial and full fingerprints.
- FileWalker: Interface for walking one root and returning FileRecords.
- DuplicateGroupReceiver: Consumer of the duplicate-group channel.
"""

from typing import Protocol, List, Optional, Callable, BinaryIO, TYPE_CHECKING
from dupescan.core.models import FileRecord

if TYPE_CHECKING:
    from dupescan.core.channel import DuplicateGroupChannel


# ===== Interfaces =====

class ContentComparator(Protocol):
    """
    A named matching strategy.

    Comparators are stateless and shared read-only between walker threads.
    """

    @property
    def name(self) -> str:
        """Stable identifier, unique among registered comparators. Part of the bucket key."""
        ...

    def can_analyse(self, path: str) -> bool:
        """Pure predicate: may this comparator handle the file at `path`?"""
        ...

    def open(self, path: str) -> BinaryIO:
        """
        Open the byte stream used for fingerprinting and comparison.
        Raises OSError if the path cannot be opened or read.
        """
        ...


class HashState(Protocol):
    """Incremental hash object (same shape as xxhash / hashlib objects)."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for seeded streaming checksums.

    Allows plugging in a different function (or a deliberately weak one in tests)
    without affecting the matching logic.
    """

    def new(self, seed: int = 0) -> HashState:
        """Create a fresh incremental hash state for the given seed."""
        ...


class FileWalker(Protocol):
    """Interface for walking a single root directory."""
    def walk(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[FileRecord]:
        ...


class DuplicateGroupReceiver(Protocol):
    """
    Consumer side of the duplicate-group channel.

    Implementations iterate `channel.receive()` until it stops, which happens on the
    EndOfScan sentinel or when the channel is closed, whichever comes first.
    """
    def run(self, channel: "DuplicateGroupChannel") -> None:
        ...
