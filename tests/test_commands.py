"""
Tests for DuplicateScanCommand: scanner thread + receiver wiring, early exit and failures.
"""
import pytest

from dupescan.commands import DuplicateScanCommand, find_duplicates
from dupescan.core.comparators import ComparatorRegistry, ExactComparator
from dupescan.core.models import ScanParams
from dupescan.receivers.listing import CollectingReceiver


class QuitAfterFirstReceiver:
    """Takes one group, then walks away like a user typing 'quit'."""

    def __init__(self):
        self.groups = []

    def run(self, channel):
        for message in channel.receive():
            self.groups.append(message)
            channel.disconnect()
            return


class ExplodingReceiver:
    def run(self, channel):
        next(iter(channel.receive()))
        raise RuntimeError("receiver crashed")


class BrokenComparator(ExactComparator):
    def can_analyse(self, path):
        raise RuntimeError("comparator bug")


def make_pairs(root, count):
    for size in range(1, count + 1):
        for copy in ("a", "b"):
            (root / f"{copy}_{size:03d}").write_bytes(b"p" * size)


class TestExecute:

    def test_returns_stats_and_streams_groups(self, test_files, temp_dir):
        receiver = CollectingReceiver()

        stats = DuplicateScanCommand().execute(ScanParams(roots=[str(temp_dir)]), receiver)

        assert [g.size for g in receiver.groups] == [2048, 1024]
        assert stats.groups_emitted == 2
        assert receiver.end_of_scan is not None
        assert receiver.end_of_scan.cancelled is False

    def test_backpressure_with_small_channel(self, tmp_path):
        make_pairs(tmp_path, 20)
        params = ScanParams(roots=[str(tmp_path)], channel_capacity=1)
        receiver = CollectingReceiver()

        DuplicateScanCommand().execute(params, receiver)

        assert [g.size for g in receiver.groups] == list(range(20, 0, -1))

    def test_receiver_quitting_early_is_not_an_error(self, tmp_path):
        make_pairs(tmp_path, 20)
        params = ScanParams(roots=[str(tmp_path)], channel_capacity=1)
        receiver = QuitAfterFirstReceiver()

        stats = DuplicateScanCommand().execute(params, receiver)

        assert [g.size for g in receiver.groups] == [20]
        assert stats.groups_emitted < 20

    def test_receiver_exception_propagates(self, tmp_path):
        make_pairs(tmp_path, 5)
        params = ScanParams(roots=[str(tmp_path)], channel_capacity=1)

        with pytest.raises(RuntimeError, match="receiver crashed"):
            DuplicateScanCommand().execute(params, ExplodingReceiver())

    def test_scanner_failure_is_reraised(self, tmp_path):
        make_pairs(tmp_path, 2)
        registry = ComparatorRegistry([BrokenComparator()])
        receiver = CollectingReceiver()

        with pytest.raises(RuntimeError, match="comparator bug"):
            DuplicateScanCommand().execute(ScanParams(roots=[str(tmp_path)]), receiver, registry=registry)

        assert receiver.end_of_scan is None

    def test_progress_callback_sees_buckets(self, tmp_path):
        make_pairs(tmp_path, 3)
        events = []

        DuplicateScanCommand().execute(
            ScanParams(roots=[str(tmp_path)]), CollectingReceiver(),
            progress_callback=lambda event, data: events.append((event, data)),
        )

        buckets = [data for event, data in events if event == "bucket"]
        assert [b["index"] for b in buckets] == [1, 2, 3]
        assert all(b["total"] == 3 for b in buckets)

    def test_stopped_flag_cancels_scan(self, test_files, temp_dir):
        receiver = CollectingReceiver()

        DuplicateScanCommand().execute(ScanParams(roots=[str(temp_dir)]), receiver, stopped_flag=lambda: True)

        assert receiver.groups == []
        assert receiver.end_of_scan.cancelled is True


class TestFindDuplicates:

    def test_returns_all_groups(self, test_files, temp_dir):
        groups = find_duplicates(ScanParams(roots=[str(temp_dir)]))

        assert len(groups) == 2
        assert groups[0].wasted_bytes == 2048
        assert groups[1].wasted_bytes == 2 * 1024
