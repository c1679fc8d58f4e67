"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/group.py
CandidateGroup: one evolving set of paths proven identical under one comparator.

MATCHING STAGES
---------------
1. Size          : guaranteed by bucketing, not re-checked here
2. Partial hash  : first BLOCK_SIZE bytes; for short streams it doubles as the full hash
3. Full hash     : whole stream, different seed
4. Byte compare  : authoritative, the only stage that can accept a candidate

Fingerprints are computed from the representative (first path) only, once,
and cached for the lifetime of the group, failures included.
"""

import logging
from typing import List, Optional

from dupescan.core.hasher import Fingerprinter, streams_equal
from dupescan.core.interfaces import ContentComparator
from dupescan.core.models import Fingerprint, ScanStats

logger = logging.getLogger(__name__)


class CandidateGroup:
    """
    Files of one bucket believed identical under one comparator.

    Attributes:
        comparator: Strategy used to open and compare streams
        size: Raw size in bytes shared by all members
        filenames: Members, representative first
    """

    def __init__(
        self,
        path: str,
        size: int,
        comparator: ContentComparator,
        fingerprinter: Optional[Fingerprinter] = None,
        stats: Optional[ScanStats] = None,
    ):
        self.comparator = comparator
        self.size = size
        self.filenames: List[str] = [path]
        self.fingerprinter = fingerprinter or Fingerprinter()
        self.stats = stats
        self._partial: Optional[Fingerprint] = None
        self._full: Optional[Fingerprint] = None

    @property
    def comparator_name(self) -> str:
        return self.comparator.name

    @property
    def representative(self) -> str:
        return self.filenames[0]

    def add(self, path: str) -> None:
        """Append a member already proven identical. Cached fingerprints are kept."""
        self.filenames.append(path)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return len(self.filenames) >= 2

    # =============================
    # Fingerprints
    # =============================

    def partial_fingerprint(self) -> bytes:
        """Partial fingerprint of the representative. Raises the cached OSError on failure."""
        if self._partial is None:
            try:
                with self.comparator.open(self.representative) as stream:
                    partial, full = self.fingerprinter.partial(stream)
                self._partial = Fingerprint(value=partial)
                if full is not None and self._full is None:
                    self._full = Fingerprint(value=full)
            except OSError as e:
                self._partial = Fingerprint(error=e)
            self._count("partial_fingerprints")
        return self._partial.unwrap()

    def full_fingerprint(self) -> bytes:
        """Full fingerprint of the representative. Raises the cached OSError on failure."""
        if self._full is None:
            try:
                with self.comparator.open(self.representative) as stream:
                    self._full = Fingerprint(value=self.fingerprinter.full(stream))
            except OSError as e:
                self._full = Fingerprint(error=e)
            self._count("full_fingerprints")
        return self._full.unwrap()

    # =============================
    # Matching
    # =============================

    def matches(self, other: "CandidateGroup") -> bool:
        """
        Decide whether `other`'s representative is identical to ours.
        Any OSError propagates; callers treat it as "not a match".
        """
        if other.size != self.size or other.comparator_name != self.comparator_name:
            return False

        if other.partial_fingerprint() != self.partial_fingerprint():
            logger.debug("partial fingerprint mismatch: %s vs %s", other.representative, self.representative)
            return False

        if other.full_fingerprint() != self.full_fingerprint():
            logger.debug("full fingerprint mismatch: %s vs %s", other.representative, self.representative)
            return False

        self._count("byte_comparisons")
        with self.comparator.open(self.representative) as ours, \
                other.comparator.open(other.representative) as theirs:
            return streams_equal(ours, theirs)

    def try_match(self, other: "CandidateGroup") -> bool:
        """matches() with I/O failures logged and reported as "not a match"."""
        try:
            return self.matches(other)
        except OSError as e:
            logger.warning(
                "io error comparator=%s candidate=%s group=%s: %s",
                self.comparator_name, other.representative, self.representative, e,
            )
            self._count("io_errors")
            return False

    def _count(self, counter: str) -> None:
        if self.stats is not None:
            self.stats.increment(counter)

    def __repr__(self):
        return f"<CandidateGroup comparator={self.comparator_name}, size={self.size}, count={len(self.filenames)}>"
