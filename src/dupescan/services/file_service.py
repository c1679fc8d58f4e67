"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File removal used by the receivers: system trash (send2trash) or permanent delete.
"""
import os
from pathlib import Path
from typing import List, Tuple
from send2trash import send2trash


class FileService:
    """
    Cross-platform removal of duplicate files.
    Both methods raise FileNotFoundError for missing paths and RuntimeError for anything else.
    """

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def delete_permanently(file_path: str):
        """Removes a file without going through the trash."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            os.remove(path)
        except OSError as e:
            raise RuntimeError(f"Failed to delete: {e}") from e

    @classmethod
    def remove_files(cls, file_paths: List[str], permanent: bool = False) -> List[Tuple[str, str]]:
        """
        Removes every path, continuing past failures.
        Returns (path, error message) for each file that could not be removed.
        """
        remove = cls.delete_permanently if permanent else cls.move_to_trash
        errors = []
        for path in file_paths:
            try:
                remove(path)
            except Exception as e:
                errors.append((path, str(e)))
        return errors
