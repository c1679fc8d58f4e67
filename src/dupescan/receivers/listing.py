"""
Non-interactive receivers: print groups as they arrive, or collect them for API callers.
"""
import sys
import logging
from typing import List, Optional, TextIO

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.interfaces import DuplicateGroupReceiver
from dupescan.core.models import DuplicateGroupMessage, EndOfScan
from dupescan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class CollectingReceiver(DuplicateGroupReceiver):
    """Keeps every received group in `groups`."""

    def __init__(self):
        self.groups: List[DuplicateGroupMessage] = []
        self.end_of_scan: Optional[EndOfScan] = None

    def run(self, channel: DuplicateGroupChannel) -> None:
        for message in channel.receive():
            self.groups.append(message)
        self.end_of_scan = channel.end_of_scan


class ListingReceiver(DuplicateGroupReceiver):
    """
    Prints each group fdupes-style: one path per line, blank line between groups.
    With show_sizes, each group is preceded by its exact per-file size.
    """

    def __init__(self, show_sizes: bool = False, out: Optional[TextIO] = None):
        self.show_sizes = show_sizes
        self.out = out or sys.stdout
        self.groups_printed = 0
        self.files_printed = 0
        self.wasted_bytes = 0

    def run(self, channel: DuplicateGroupChannel) -> None:
        for message in channel.receive():
            self.print_group(message)

        if channel.end_of_scan is None:
            logger.warning("scan ended without completion marker, output may be incomplete")

    def print_group(self, message: DuplicateGroupMessage) -> None:
        if self.groups_printed:
            print(file=self.out)
        if self.show_sizes:
            print(ConvertUtils.bytes_each(message.size) + ":", file=self.out)
        for filename in message.filenames:
            print(filename, file=self.out)
        self.out.flush()

        self.groups_printed += 1
        self.files_printed += len(message.filenames)
        self.wasted_bytes += message.wasted_bytes

    def summary(self) -> str:
        if not self.groups_printed:
            return "No duplicate groups found."
        return (f"{self.files_printed} duplicate files (in {self.groups_printed} sets), "
                f"occupying {ConvertUtils.bytes_to_human(self.wasted_bytes)} of extra space")
