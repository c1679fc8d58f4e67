"""
Line-prompt receiver: asks which files of each group to preserve and removes the rest.

    [1] /photos/a.jpg
    [2] /backup/a.jpg

    (3/12) Preserve files [1 - 2, all, none, quit] (2,048 bytes each):

Numbers keep files, 'all' keeps every file, 'none' purges every file, 'quit' stops.
"""
import sys
import logging
from typing import Callable, List, Optional, TextIO, Tuple

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.interfaces import DuplicateGroupReceiver
from dupescan.core.models import DuplicateGroupMessage
from dupescan.services.duplicate_service import DuplicateService, Mark, QuitRequested
from dupescan.services.file_service import FileService
from dupescan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class PromptReceiver(DuplicateGroupReceiver):
    """
    Interactive receiver. Unkept files go to the system trash, or are deleted
    for good when `permanent` is set. A failed removal is reported and skipped.
    """

    def __init__(
        self,
        show_sizes: bool = False,
        permanent: bool = False,
        input_func: Optional[Callable[[str], str]] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self.show_sizes = show_sizes
        self.permanent = permanent
        self.input_func = input_func or input
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.removed: List[str] = []
        self.failed: List[Tuple[str, str]] = []
        self.quit_requested = False

    def run(self, channel: DuplicateGroupChannel) -> None:
        for message in channel.receive():
            try:
                self.handle_group(message)
            except QuitRequested:
                logger.info("user quit at group %d/%d", message.bucket_index, message.bucket_count)
                self.quit_requested = True
                channel.disconnect()
                return
            except EOFError:
                # stdin closed: nothing more can be answered
                self.quit_requested = True
                channel.disconnect()
                return

    def prompt_text(self, message: DuplicateGroupMessage) -> str:
        text = (f"({message.bucket_index}/{message.bucket_count}) "
                f"Preserve files [1 - {len(message.filenames)}, all, none, quit]")
        if self.show_sizes:
            text += f" ({ConvertUtils.bytes_each(message.size)})"
        return text + ": "

    def handle_group(self, message: DuplicateGroupMessage) -> None:
        if len(message.filenames) < 2:
            return

        for index, filename in enumerate(message.filenames, 1):
            print(f"[{index}] {filename}", file=self.out)

        while True:
            marks = DuplicateService.initial_marks(list(message.filenames))
            buffer = self.input_func(self.prompt_text(message))
            done, marks = DuplicateService.process_input(buffer, marks)
            if done:
                break
        print(file=self.out)

        for filename, mark in marks:
            if mark is Mark.KEEP:
                print(f"   [+] {filename}", file=self.out)

        to_purge = DuplicateService.files_to_purge(marks)
        errors = FileService.remove_files(to_purge, permanent=self.permanent)
        failed_paths = {path for path, _ in errors}
        for path in to_purge:
            if path not in failed_paths:
                print(f"   [-] {path}", file=self.out)
                self.removed.append(path)
        for path, error in errors:
            action = "delete" if self.permanent else "put in trash"
            print(f"Failed to {action} {path}: {error}", file=self.err)
            self.failed.append((path, error))
        print(file=self.out)
