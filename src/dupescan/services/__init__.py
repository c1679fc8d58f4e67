"""File operations and duplicate group selection services."""

from .file_service import FileService
from .duplicate_service import DuplicateService, Mark, QuitRequested

__all__ = ["FileService", "DuplicateService", "Mark", "QuitRequested"]
