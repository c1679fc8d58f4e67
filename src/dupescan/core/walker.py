"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Walks one root directory and collects FileRecords.
Features:
- Uses os.walk for fast traversal, recursive or top-level only
- Skips symbolic links, system trash and excluded directories
- Applies the minimum size filter
- Unreadable directories are recorded as WalkErrors, the walk continues
"""

import os
import stat
import sys
from typing import List, Optional, Callable
from pathlib import Path
import time
import logging

from dupescan.core.errors import WalkError
from dupescan.core.interfaces import FileWalker
from dupescan.core.models import FileRecord

logger = logging.getLogger(__name__)


class DirectoryWalker(FileWalker):
    """
    Collects regular files under a single root.

    Attributes:
        root_dir: Root directory to walk
        recursive: Descend into subdirectories (False = top level only)
        min_size: Minimum file size in bytes (inclusive)
        excluded_dirs: Directories that are never entered
        errors: WalkErrors recorded by the last walk()
    """

    def __init__(
        self,
        root_dir: str,
        recursive: bool = True,
        min_size: int = 1,
        excluded_dirs: Optional[List[str]] = None,
    ):
        self.root_dir = root_dir
        self.recursive = recursive
        self.min_size = min_size
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.errors: List[WalkError] = []

    def walk(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[FileRecord]:
        """
        Single-pass walk. Returns what was collected, even if parts of the tree
        could not be read or the walk was cancelled.
        """
        logger.info("scan started root=%s recursive=%s min_size=%s", self.root_dir, self.recursive, self.min_size)
        start_time = time.time()
        self.errors = []
        found_files: List[FileRecord] = []

        if stopped_flag and stopped_flag():
            logger.debug("Walk cancelled before start: %s", self.root_dir)
            return found_files

        try:
            for root, dirs, files in os.walk(self.root_dir, onerror=self._on_error):
                if stopped_flag and stopped_flag():
                    logger.debug("Walk interrupted: %s", self.root_dir)
                    break

                if self.recursive:
                    # Pre-filter subdirectories BEFORE os.walk enters them
                    dirs[:] = [d for d in dirs if self._prefilter_dirs(Path(root) / d)]
                else:
                    dirs[:] = []

                for filename in sorted(files):
                    if stopped_flag and stopped_flag():
                        break
                    record = self._process_file(os.path.join(root, filename))
                    if record:
                        found_files.append(record)
        except OSError as e:
            self._on_error(e)

        elapsed_time = time.time() - start_time
        logger.info(
            "scan finished root=%s files=%d errors=%d time=%.2fs",
            self.root_dir, len(found_files), len(self.errors), elapsed_time,
        )
        return found_files

    def _on_error(self, error: OSError) -> None:
        walk_error = WalkError(getattr(error, "filename", None) or self.root_dir, error)
        logger.warning("walk error path=%s: %s", walk_error.path, error)
        self.errors.append(walk_error)

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """
        Check if path belongs to OS trash/recycle bin (cross-platform).
        Returns False on any error (fail-safe: better to scan than skip valid data).
        """
        try:
            path_str = str(path.resolve(strict=False))

            if sys.platform == "win32":
                if "$Recycle.Bin" in path_str or "\\Recycler\\" in path_str:
                    return True
            elif sys.platform == "darwin":
                if "/.Trash/" in path_str or path_str.endswith("/.Trash"):
                    return True
            else:
                # Linux/BSD: freedesktop.org standard locations
                if ".local/share/Trash" in path_str or "/.trash/" in path_str:
                    return True

            return False
        except (OSError, ValueError):
            return False

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is within an excluded directory."""
        try:
            path_str = str(path.resolve(strict=False))
            for excluded_dir in excluded_dirs:
                normalized_excluded = os.path.normpath(excluded_dir)
                if path_str.startswith(normalized_excluded + os.sep) or \
                        path_str == normalized_excluded:
                    return True
            return False
        except (OSError, ValueError):
            return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Skip symlinked directories, system trash and excluded directories."""
        if path.is_symlink():
            logger.debug("Skipping symlinked directory: %s", path)
            return False

        if DirectoryWalker._is_system_trash(path):
            logger.debug("Skipping system trash directory: %s", path)
            return False

        if self.excluded_dirs and self._is_excluded_directory(path, self.excluded_dirs):
            logger.debug("Skipping excluded directory: %s", path)
            return False

        return True

    def _process_file(self, path: str) -> Optional[FileRecord]:
        """
        Return a FileRecord for a regular, non-symlink file that passes the size filter.
        Entries that cannot be stat'ed are recorded as WalkErrors.
        """
        try:
            stat_result = os.lstat(path)
        except OSError as e:
            self._on_error(e)
            return None

        if stat.S_ISLNK(stat_result.st_mode):
            logger.debug("Skipping symbolic link: %s", path)
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug("Skipping non-regular file: %s", path)
            return None

        size = stat_result.st_size
        if size < self.min_size:
            logger.debug("Skipping %s (size %d bytes below minimum)", path, size)
            return None

        return FileRecord(path=path, size=size)
