"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Buckets FileRecords by (size, comparator) and turns each bucket into CandidateGroups
by incremental matching: every candidate is tried against the groups already formed,
in creation order, and joins the first one it matches.
"""

import logging
import os
from collections import defaultdict
from typing import List, Dict, Tuple, Iterable, Optional, Callable

from dupescan.core.comparators import ComparatorRegistry
from dupescan.core.group import CandidateGroup
from dupescan.core.hasher import Fingerprinter
from dupescan.core.interfaces import ContentComparator
from dupescan.core.models import FileRecord, ScanStats

logger = logging.getLogger(__name__)

BucketKey = Tuple[int, str]  # (size, comparator name)


class FileGrouperImpl:
    """
    Bucketing and per-bucket matching.
    Uses an injected Fingerprinter for flexibility and testability.
    """

    def __init__(self, fingerprinter: Optional[Fingerprinter] = None, stats: Optional[ScanStats] = None):
        self.fingerprinter = fingerprinter or Fingerprinter()
        self.stats = stats

    def group_by_size_and_comparator(
        self,
        records: Iterable[FileRecord],
        registry: ComparatorRegistry,
    ) -> Dict[BucketKey, List[FileRecord]]:
        """
        Groups files by size under every comparator that can analyse them.
        A file eligible for several comparators lands in one bucket per comparator.
        Buckets with fewer than two files are dropped.
        """
        buckets: Dict[BucketKey, List[FileRecord]] = defaultdict(list)
        seen = set()
        for record in records:
            real_path = os.path.realpath(record.path)
            if real_path in seen:
                # Overlapping roots report the same file twice
                logger.debug("Skipping file already seen through another root: %s", record.path)
                continue
            seen.add(real_path)

            for comparator in registry:
                if comparator.can_analyse(record.path):
                    buckets[(record.size, comparator.name)].append(record)

        return {key: files for key, files in buckets.items() if len(files) >= 2}

    @staticmethod
    def order_buckets(
        buckets: Dict[BucketKey, List[FileRecord]],
        registry: ComparatorRegistry,
    ) -> List[Tuple[BucketKey, List[FileRecord]]]:
        """Largest size first; equal sizes follow comparator registration order."""
        rank = {name: index for index, name in enumerate(registry.names())}
        return sorted(buckets.items(), key=lambda item: (-item[0][0], rank.get(item[0][1], len(rank))))

    def build_groups(
        self,
        size: int,
        comparator: ContentComparator,
        records: List[FileRecord],
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> List[CandidateGroup]:
        """
        Incrementally match one bucket.
        Returns only groups with at least two members, in the order their
        representative was first seen.
        """
        groups: List[CandidateGroup] = []
        for record in records:
            if stopped_flag and stopped_flag():
                return []
            self._count("candidates")
            candidate = CandidateGroup(
                record.path, size, comparator,
                fingerprinter=self.fingerprinter, stats=self.stats,
            )
            for group in groups:
                if group.try_match(candidate):
                    group.add(record.path)
                    break
            else:
                groups.append(candidate)

        duplicates = [group for group in groups if group.is_duplicate()]
        logger.info(
            "bucket matched size=%d comparator=%s candidates=%d groups=%d",
            size, comparator.name, len(records), len(duplicates),
        )
        return duplicates

    def _count(self, counter: str) -> None:
        if self.stats is not None:
            self.stats.increment(counter)
