"""
Unified command orchestrator for duplicate scanning.
This is the SINGLE source of truth for wiring — used by the CLI and by library callers.
No terminal dependencies — pure Python.
"""
import logging
import threading
from typing import Dict, List, Optional, Callable

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.comparators import ComparatorRegistry
from dupescan.core.errors import ChannelError
from dupescan.core.hasher import Fingerprinter
from dupescan.core.interfaces import DuplicateGroupReceiver
from dupescan.core.models import DuplicateGroupMessage, ScanParams, ScanStats
from dupescan.core.scanner import DupeScanner
from dupescan.receivers.listing import CollectingReceiver

logger = logging.getLogger(__name__)


class DuplicateScanCommand:
    """
    Runs the scanner on a background thread and the receiver on the calling thread:
    1. Build the channel from params.channel_capacity
    2. Start DupeScanner.find_groups() in a worker thread
    3. Run receiver.run(channel) until end of stream
    4. Join the scanner and re-raise its failure, if any

    Usage:
        # Print groups as they are found:
        params = ScanParams(roots=["/photos", "/backup"])
        stats = DuplicateScanCommand().execute(params, ListingReceiver())

        # With console progress and cancellation:
        stats = command.execute(
            params, receiver,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self, fingerprinter: Optional[Fingerprinter] = None):
        self.fingerprinter = fingerprinter

    def execute(
            self,
            params: ScanParams,
            receiver: DuplicateGroupReceiver,
            registry: Optional[ComparatorRegistry] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, Dict], None]] = None,
    ) -> ScanStats:
        """
        Execute one scan.

        Args:
            params: Validated scan parameters
            receiver: Consumer of the duplicate groups, run on the calling thread
            registry: Available comparators (default: exact + json)
            stopped_flag: () -> bool (returns True if the scan should stop)
            progress_callback: (event: str, data: dict) -> None, called from the scanner thread

        Returns:
            The scanner's ScanStats

        Raises:
            ConfigError: If an enabled comparator is unknown
            ChannelError: If the channel failed while the receiver was still listening
        """
        cancel = threading.Event()

        def should_stop() -> bool:
            return cancel.is_set() or (stopped_flag is not None and stopped_flag())

        channel = DuplicateGroupChannel(capacity=params.channel_capacity)
        scanner = DupeScanner(params, channel, registry=registry, fingerprinter=self.fingerprinter)
        if progress_callback:
            scanner.stats.add_listener(progress_callback)
        failure: List[BaseException] = []

        def run_scanner():
            try:
                scanner.find_groups(stopped_flag=should_stop)
            except BaseException as e:
                failure.append(e)

        worker = threading.Thread(target=run_scanner, name="dupescanner", daemon=True)
        worker.start()
        try:
            receiver.run(channel)
        finally:
            stopped_early = channel.end_of_scan is None
            if stopped_early:
                # Receiver returned before end of stream: stop walking and release a blocked sender
                cancel.set()
                channel.disconnect()
            worker.join()

        if failure:
            error = failure[0]
            if isinstance(error, ChannelError) and stopped_early:
                logger.info("receiver stopped before the scan finished")
            else:
                raise error

        return scanner.stats


def find_duplicates(
        params: ScanParams,
        registry: Optional[ComparatorRegistry] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
) -> List[DuplicateGroupMessage]:
    """Run a scan and return every duplicate group, largest size first."""
    receiver = CollectingReceiver()
    DuplicateScanCommand().execute(params, receiver, registry=registry, stopped_flag=stopped_flag)
    return receiver.groups
