"""
Tests for the receivers: listing output, the preserve prompt and keep-one deletion.
Removal is mocked at the FileService level so no file leaves the test directory.
"""
import io
from unittest import mock

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.models import DuplicateGroupMessage, EndOfScan
from dupescan.receivers import CollectingReceiver, KeepOneReceiver, ListingReceiver, PromptReceiver
from dupescan.services.file_service import FileService


def message(size, *paths, bucket_index=1, bucket_count=1):
    return DuplicateGroupMessage(
        size=size, total_groups_in_batch=1, group_index=1, filenames=paths,
        bucket_index=bucket_index, bucket_count=bucket_count,
    )


def feed(*messages, end=True, cancelled=False):
    """Channel pre-loaded with messages, optionally followed by EndOfScan, then closed."""
    channel = DuplicateGroupChannel(capacity=len(messages) + 2)
    for m in messages:
        channel.send(m)
    if end:
        channel.send(EndOfScan(cancelled=cancelled))
    channel.close()
    return channel


def answers(*replies):
    """input() replacement returning the given replies and recording the prompts."""
    prompts = []
    replies = iter(replies)

    def fake_input(prompt):
        prompts.append(prompt)
        return next(replies)

    fake_input.prompts = prompts
    return fake_input


class TestCollectingReceiver:

    def test_collects_groups_and_end_marker(self):
        receiver = CollectingReceiver()
        receiver.run(feed(message(10, "/a", "/b")))

        assert len(receiver.groups) == 1
        assert receiver.end_of_scan is not None


class TestListingReceiver:

    def test_paths_one_per_line_blank_line_between_groups(self):
        out = io.StringIO()
        ListingReceiver(out=out).run(feed(message(20, "/a", "/b"), message(10, "/c", "/d")))

        assert out.getvalue() == "/a\n/b\n\n/c\n/d\n"

    def test_sizes_header(self):
        out = io.StringIO()
        ListingReceiver(show_sizes=True, out=out).run(feed(message(2048, "/a", "/b")))

        assert out.getvalue() == "2,048 bytes each:\n/a\n/b\n"

    def test_summary(self):
        receiver = ListingReceiver(out=io.StringIO())
        receiver.run(feed(message(100, "/a", "/b", "/c"), message(50, "/d", "/e")))

        assert receiver.summary().startswith("5 duplicate files (in 2 sets)")
        assert receiver.wasted_bytes == 250

    def test_summary_without_groups(self):
        receiver = ListingReceiver(out=io.StringIO())
        receiver.run(feed())

        assert receiver.summary() == "No duplicate groups found."


class TestPromptReceiver:

    def test_keeps_chosen_file_and_trashes_the_rest(self):
        out = io.StringIO()
        receiver = PromptReceiver(input_func=answers("2"), out=out, err=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(10, "/a", "/b", "/c")))

        assert [c.args[0] for c in trash.call_args_list] == ["/a", "/c"]
        assert receiver.removed == ["/a", "/c"]
        text = out.getvalue()
        assert "[1] /a" in text
        assert "[+] /b" in text
        assert "[-] /a" in text and "[-] /c" in text

    def test_all_keeps_everything(self):
        receiver = PromptReceiver(input_func=answers("all"), out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(10, "/a", "/b")))

        trash.assert_not_called()

    def test_invalid_answer_repeats_prompt(self):
        fake_input = answers("what?", "", "1")
        receiver = PromptReceiver(input_func=fake_input, out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash"):
            receiver.run(feed(message(10, "/a", "/b")))

        assert len(fake_input.prompts) == 3

    def test_prompt_shows_progress_and_size(self):
        fake_input = answers("1")
        receiver = PromptReceiver(show_sizes=True, input_func=fake_input, out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash"):
            receiver.run(feed(message(1024, "/a", "/b", bucket_index=3, bucket_count=7)))

        assert fake_input.prompts == ["(3/7) Preserve files [1 - 2, all, none, quit] (1,024 bytes each): "]

    def test_permanent_deletes_instead_of_trash(self):
        receiver = PromptReceiver(permanent=True, input_func=answers("1"), out=io.StringIO())

        with mock.patch.object(FileService, "delete_permanently") as delete, \
                mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(10, "/a", "/b")))

        delete.assert_called_once_with("/b")
        trash.assert_not_called()

    def test_failed_removal_is_reported_and_processing_continues(self):
        err = io.StringIO()
        receiver = PromptReceiver(input_func=answers("1", "1"), out=io.StringIO(), err=err)

        def trash(path):
            if path == "/b":
                raise RuntimeError("Failed to move to trash: busy")

        with mock.patch.object(FileService, "move_to_trash", side_effect=trash):
            receiver.run(feed(message(20, "/a", "/b"), message(10, "/c", "/d")))

        assert receiver.failed == [("/b", "Failed to move to trash: busy")]
        assert receiver.removed == ["/d"]
        assert "Failed to put in trash /b" in err.getvalue()

    def test_quit_disconnects_channel(self):
        channel = feed(message(20, "/a", "/b"), message(10, "/c", "/d"))
        fake_input = answers("quit")
        receiver = PromptReceiver(input_func=fake_input, out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(channel)

        assert receiver.quit_requested
        assert channel.disconnected
        assert len(fake_input.prompts) == 1
        trash.assert_not_called()

    def test_end_of_input_stops_like_quit(self):
        def closed_stdin(prompt):
            raise EOFError

        channel = feed(message(20, "/a", "/b"))
        receiver = PromptReceiver(input_func=closed_stdin, out=io.StringIO())
        receiver.run(channel)

        assert receiver.quit_requested
        assert channel.disconnected


class TestKeepOneReceiver:

    def test_force_removes_all_but_first(self):
        out = io.StringIO()
        receiver = KeepOneReceiver(force=True, out=out)

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(100, "/keep1", "/del1", "/del2"), message(50, "/keep2", "/del3")))

        assert [c.args[0] for c in trash.call_args_list] == ["/del1", "/del2", "/del3"]
        assert receiver.deleted == ["/del1", "/del2", "/del3"]
        text = out.getvalue()
        assert "[KEEP] /keep1" in text
        assert "[DEL]  /del3" in text

    def test_declined_confirmation_deletes_nothing(self):
        receiver = KeepOneReceiver(confirm=lambda prompt: "n", out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(100, "/keep", "/del")))

        trash.assert_not_called()
        assert receiver.cancelled

    def test_confirmed_deletion(self):
        receiver = KeepOneReceiver(confirm=lambda prompt: "yes", out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(100, "/keep", "/del")))

        trash.assert_called_once_with("/del")

    def test_cancelled_scan_deletes_nothing(self):
        receiver = KeepOneReceiver(force=True, out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(100, "/keep", "/del"), cancelled=True))

        trash.assert_not_called()
        assert receiver.cancelled

    def test_missing_end_of_scan_deletes_nothing(self):
        receiver = KeepOneReceiver(force=True, out=io.StringIO())

        with mock.patch.object(FileService, "move_to_trash") as trash:
            receiver.run(feed(message(100, "/keep", "/del"), end=False))

        trash.assert_not_called()

    def test_partial_failure_is_reported(self):
        out = io.StringIO()
        receiver = KeepOneReceiver(force=True, out=out)

        with mock.patch.object(FileService, "move_to_trash", side_effect=[None, RuntimeError("locked")]):
            receiver.run(feed(message(100, "/keep", "/del1", "/del2")))

        assert receiver.deleted == ["/del1"]
        assert receiver.failed == [("/del2", "locked")]
        assert "Partial success: 1/2" in out.getvalue()

    def test_file_grouped_by_two_comparators_is_removed_once(self, tmp_path):
        first, second = tmp_path / "a.json", tmp_path / "b.json"
        first.write_text('{"k":1}')
        second.write_text('{"k":1}')
        paths = (str(first), str(second))
        out = io.StringIO()
        receiver = KeepOneReceiver(force=True, permanent=True, out=out)

        receiver.run(feed(
            DuplicateGroupMessage(size=7, total_groups_in_batch=1, group_index=1, filenames=paths, comparator="exact"),
            DuplicateGroupMessage(size=7, total_groups_in_batch=1, group_index=1, filenames=paths, comparator="json"),
        ))

        assert receiver.deleted == [str(second)]
        assert receiver.failed == []
        assert first.exists() and not second.exists()
        text = out.getvalue()
        assert "Successfully removed 1 files." in text
        assert "Total space saved: 7B" in text
