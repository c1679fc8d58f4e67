"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Pure selection logic for duplicate groups: which files to keep, which to purge.
No terminal or filesystem access, receivers do the I/O.
"""
import re
from enum import Enum
from typing import List, Tuple

from dupescan.core.models import DuplicateGroupMessage

_TOKEN_SEPARATORS = re.compile(r"[\s,]+")


class Mark(Enum):
    KEEP = "keep"
    PURGE = "purge"


class QuitRequested(Exception):
    """The user typed 'quit' at a preserve prompt."""


class DuplicateService:
    @staticmethod
    def initial_marks(filenames: List[str]) -> List[Tuple[str, Mark]]:
        """Every file starts marked for purging until the user preserves it."""
        return [(filename, Mark.PURGE) for filename in filenames]

    @staticmethod
    def mark_all(files: List[Tuple[str, Mark]], mark: Mark) -> List[Tuple[str, Mark]]:
        return [(filename, mark) for filename, _ in files]

    @staticmethod
    def process_input(buffer: str, files: List[Tuple[str, Mark]]) -> Tuple[bool, List[Tuple[str, Mark]]]:
        """
        Apply one line of prompt input to the marks.

        Tokens are separated by whitespace or commas:
        - a 1-based number keeps that file
        - 'all' keeps every file, 'none' purges every file
        - 'quit' raises QuitRequested
        Unknown tokens and out-of-range numbers are ignored.

        Returns (done, marks); done is False when no token was usable,
        meaning the prompt must be shown again.
        """
        done = False
        for choice in _TOKEN_SEPARATORS.split(buffer.strip()):
            choice = choice.strip().lower()
            if not choice:
                continue
            if choice == "quit":
                raise QuitRequested()
            if choice == "none":
                files = DuplicateService.mark_all(files, Mark.PURGE)
                done = True
            elif choice == "all":
                files = DuplicateService.mark_all(files, Mark.KEEP)
                done = True
            elif choice.isdigit():
                index = int(choice) - 1
                if 0 <= index < len(files):
                    files = [
                        (filename, Mark.KEEP if i == index else mark)
                        for i, (filename, mark) in enumerate(files)
                    ]
                    done = True
        return done, files

    @staticmethod
    def files_to_purge(files: List[Tuple[str, Mark]]) -> List[str]:
        return [filename for filename, mark in files if mark is Mark.PURGE]

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroupMessage]) -> List[str]:
        """
        Keeps the first file of every group (the representative) and
        returns the paths of all the others, each path once.
        A file reported by several comparators is never deleted if any
        of its groups keeps it.
        """
        kept = {group.filenames[0] for group in groups if group.filenames}
        files_to_delete = []
        seen = set()
        for group in groups:
            for filename in group.filenames[1:]:
                if filename in kept or filename in seen:
                    continue
                seen.add(filename)
                files_to_delete.append(filename)
        return files_to_delete

    @staticmethod
    def calculate_space_savings(groups: List[DuplicateGroupMessage], files_to_delete: List[str]) -> int:
        """Total bytes freed by deleting `files_to_delete`."""
        sizes = {}
        for group in groups:
            for filename in group.filenames:
                sizes.setdefault(filename, group.size)
        return sum(sizes.get(filename, 0) for filename in set(files_to_delete))
