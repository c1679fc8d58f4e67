"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the duplicate scanning engine.

Per-file failures (plain OSError, WalkError) are recovered inside the engine.
ConfigError and ChannelError are the only ones that reach the caller.
"""
from typing import Optional


class DupeScanError(Exception):
    """Base class for all dupescan errors."""


class WalkError(DupeScanError):
    """A directory or directory entry could not be read during the walk."""

    def __init__(self, path: str, cause: Optional[OSError] = None):
        self.path = path
        self.cause = cause
        message = f"Cannot read {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigError(DupeScanError, ValueError):
    """Invalid scan configuration (roots, sizes, comparators)."""


class ChannelError(DupeScanError, RuntimeError):
    """The duplicate-group channel was closed while the scanner still had messages to send."""
