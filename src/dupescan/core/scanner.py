"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
DupeScanner: orchestrates one duplicate search and streams the results to a channel.

PIPELINE
--------
IDLE → SCANNING : one walker thread per root, all joined before bucketing
SCANNING → MATCHING : bucket by (size, comparator), drop buckets with < 2 files,
                      match buckets largest size first, send each finished group
MATCHING → DONE : send EndOfScan, close the channel

A failing root only loses its own files. I/O errors while matching only exclude
the affected candidate. Channel failures end the invocation with ChannelError.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Callable

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.comparators import ComparatorRegistry, default_registry
from dupescan.core.grouper import FileGrouperImpl
from dupescan.core.hasher import Fingerprinter
from dupescan.core.models import (
    DuplicateGroupMessage, EndOfScan, FileRecord, ScanParams, ScanState, ScanStats,
)
from dupescan.core.walker import DirectoryWalker

logger = logging.getLogger(__name__)


class DupeScanner:
    """
    Finds duplicate groups for one ScanParams and sends them to `channel`.
    A DupeScanner runs once: find_groups() on a DONE scanner raises RuntimeError.
    """

    def __init__(
        self,
        params: ScanParams,
        channel: DuplicateGroupChannel,
        registry: Optional[ComparatorRegistry] = None,
        fingerprinter: Optional[Fingerprinter] = None,
    ):
        self.params = params
        self.channel = channel
        self.registry = (registry if registry is not None else default_registry()).select(params.comparators)
        self.stats = ScanStats()
        self.grouper = FileGrouperImpl(fingerprinter=fingerprinter, stats=self.stats)
        self._state = ScanState.IDLE
        logger.info("comparators: %s", self.registry.names())

    @property
    def state(self) -> ScanState:
        return self._state

    def _transition(self, new_state: ScanState) -> None:
        logger.debug("scanner state %s -> %s", self._state.value, new_state.value)
        self._state = new_state
        self.stats.notify(new_state.value, {"state": new_state})

    def find_groups(self, stopped_flag: Optional[Callable[[], bool]] = None) -> ScanStats:
        """
        Run the whole scan. Always ends with EndOfScan and a closed channel,
        unless the channel itself failed.

        Raises:
            RuntimeError: if this scanner already ran
            ChannelError: if the receiver disconnected while groups remained to send
        """
        if self._state is not ScanState.IDLE:
            raise RuntimeError(f"Scanner already used (state: {self._state.value})")

        start_time = time.time()
        cancelled = False
        try:
            self._transition(ScanState.SCANNING)
            records = self.find_files(stopped_flag=stopped_flag)

            self._transition(ScanState.MATCHING)
            if stopped_flag and stopped_flag():
                cancelled = True
            else:
                cancelled = not self.build_matches(records, stopped_flag=stopped_flag)

            self.stats.total_time = time.time() - start_time
            self.channel.send(EndOfScan(stats=self.stats, cancelled=cancelled))
        finally:
            self.stats.total_time = time.time() - start_time
            self.channel.close()
            self._transition(ScanState.DONE)

        logger.info("scan complete: %d groups emitted in %.2fs", self.stats.groups_emitted, self.stats.total_time)
        return self.stats

    # =============================
    # Walk phase
    # =============================

    def find_files(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[FileRecord]:
        """Walk every root concurrently and return all records once every walker has finished."""
        logger.info(
            "find all files in %s (recursive: %s, min_size: %d)",
            self.params.roots, self.params.recursive, self.params.effective_min_size,
        )
        start_time = time.time()
        walkers = [
            DirectoryWalker(
                root_dir=root,
                recursive=self.params.recursive,
                min_size=self.params.effective_min_size,
                excluded_dirs=self.params.excluded_dirs,
            )
            for root in self.params.roots
        ]

        records: List[FileRecord] = []
        with ThreadPoolExecutor(max_workers=len(walkers), thread_name_prefix="walker") as executor:
            futures = [executor.submit(walker.walk, stopped_flag) for walker in walkers]
            # Results are collected in root order, not completion order
            for walker, future in zip(walkers, futures):
                try:
                    records.extend(future.result())
                except Exception:
                    logger.exception("walker for %s failed", walker.root_dir)
                    self.stats.increment("walk_errors")
                self.stats.increment("walk_errors", len(walker.errors))

        self.stats.files_found = len(records)
        self.stats.walk_time = time.time() - start_time
        return records

    # =============================
    # Match phase
    # =============================

    def build_matches(self, records: List[FileRecord], stopped_flag: Optional[Callable[[], bool]] = None) -> bool:
        """
        Bucket and match. Returns False if cancelled before all buckets were processed.
        """
        start_time = time.time()
        buckets = self.grouper.group_by_size_and_comparator(records, self.registry)
        ordered = self.grouper.order_buckets(buckets, self.registry)
        self.stats.buckets = len(ordered)
        logger.info("%d non-unique buckets (by size and comparator)", len(ordered))

        completed = True
        bucket_count = len(ordered)
        for bucket_index, ((size, name), bucket_records) in enumerate(ordered, 1):
            if stopped_flag and stopped_flag():
                completed = False
                break

            groups = self.grouper.build_groups(size, self.registry.get(name), bucket_records, stopped_flag)
            total = len(groups)
            for group_index, group in enumerate(groups, 1):
                message = DuplicateGroupMessage(
                    size=group.size,
                    total_groups_in_batch=total,
                    group_index=group_index,
                    filenames=tuple(group.filenames),
                    comparator=group.comparator_name,
                    bucket_index=bucket_index,
                    bucket_count=bucket_count,
                )
                logger.debug("send: %r", message)
                self.channel.send(message)
                self.stats.increment("groups_emitted")

            self.stats.notify("bucket", {"index": bucket_index, "total": bucket_count, "groups": total})

        if stopped_flag and stopped_flag():
            completed = False
        self.stats.match_time = time.time() - start_time
        return completed
