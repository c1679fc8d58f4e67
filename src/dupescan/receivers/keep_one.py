"""
Non-interactive receiver: keep the first file of every group, remove the others.
Shows a full preview before anything is removed; asks for confirmation unless forced.
"""
import os
import sys
import logging
from typing import Callable, List, Optional, TextIO, Tuple

from dupescan.core.channel import DuplicateGroupChannel
from dupescan.core.interfaces import DuplicateGroupReceiver
from dupescan.core.models import DuplicateGroupMessage
from dupescan.services.duplicate_service import DuplicateService
from dupescan.services.file_service import FileService
from dupescan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class KeepOneReceiver(DuplicateGroupReceiver):
    """
    Collects every group, previews [KEEP]/[DEL] per file, then removes the
    duplicates. `confirm` is asked once for the whole batch unless `force`.
    """

    def __init__(
        self,
        force: bool = False,
        permanent: bool = False,
        confirm: Optional[Callable[[str], str]] = None,
        out: Optional[TextIO] = None,
        verbose: bool = False,
    ):
        self.force = force
        self.permanent = permanent
        self.confirm = confirm or input
        self.out = out or sys.stdout
        self.verbose = verbose
        self.groups: List[DuplicateGroupMessage] = []
        self.deleted: List[str] = []
        self.failed: List[Tuple[str, str]] = []
        self.cancelled = False

    def run(self, channel: DuplicateGroupChannel) -> None:
        self.groups = list(channel.receive())
        if channel.end_of_scan is None or channel.end_of_scan.cancelled:
            # Never delete on the basis of a partial result
            print("Scan did not complete, nothing will be deleted.", file=self.out)
            self.cancelled = True
            return
        self.execute()

    def execute(self) -> None:
        if not self.groups:
            print("No duplicate groups found.", file=self.out)
            return

        files_to_delete = DuplicateService.keep_only_one_file_per_group(self.groups)
        space_saved = DuplicateService.calculate_space_savings(self.groups, files_to_delete)
        space_saved_str = ConvertUtils.bytes_to_human(space_saved)

        self.print_preview()
        print("=" * 60, file=self.out)
        print(f"Summary: Keep 1 file per group ({len(self.groups)} files preserved, "
              f"{len(files_to_delete)} files deleted)", file=self.out)
        print(f"Total space saved: {space_saved_str}", file=self.out)
        print(file=self.out)

        action = "delete" if self.permanent else "move"
        target = "" if self.permanent else " to trash"
        if self.force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...", file=self.out)
        else:
            response = self.confirm(f"Are you sure you want to {action} {len(files_to_delete)} files{target}? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.", file=self.out)
                self.cancelled = True
                return

        print(f"\nRemoving {len(files_to_delete)} files...", file=self.out)
        for i, path in enumerate(files_to_delete, 1):
            if self.verbose:
                print(f"  [{i}/{len(files_to_delete)}] {os.path.basename(path)}", file=self.out)
            errors = FileService.remove_files([path], permanent=self.permanent)
            if errors:
                self.failed.extend(errors)
                logger.warning("Failed to remove %s: %s", path, errors[0][1])
            else:
                self.deleted.append(path)

        if self.failed:
            print(f"\n⚠️  Partial success: {len(self.deleted)}/{len(files_to_delete)} files removed.", file=self.out)
            print(f"Failed to remove {len(self.failed)} file(s):", file=self.out)
            for path, error in self.failed[:5]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}", file=self.out)
            if len(self.failed) > 5:
                print(f"  ...and {len(self.failed) - 5} more files", file=self.out)
        else:
            print(f"✅ Successfully removed {len(self.deleted)} files.", file=self.out)
            print(f"Total space saved: {space_saved_str}", file=self.out)

    def print_preview(self) -> None:
        print(file=self.out)
        for idx, group in enumerate(self.groups, 1):
            size_str = ConvertUtils.bytes_to_human(group.size)
            print(f"📁 Group {idx} | Size: {size_str} | Files: {len(group.filenames)}", file=self.out)
            print("-" * 60, file=self.out)
            print(f"   [KEEP] {group.filenames[0]}", file=self.out)
            for filename in group.filenames[1:]:
                print(f"   [DEL]  {filename}", file=self.out)
            print(file=self.out)
