"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/comparators.py
Built-in content comparators and the ordered registry the scanner dispatches through.

- ExactComparator: raw bytes, every file is eligible
- JsonComparator: canonicalized JSON (sorted keys, compact separators), only .json files that parse
"""

import io
import json
import logging
import os
from typing import BinaryIO, Dict, Iterator, List, Optional

from dupescan.core.errors import ConfigError
from dupescan.core.interfaces import ContentComparator

logger = logging.getLogger(__name__)


class ExactComparator(ContentComparator):
    """Byte-exact comparison of the raw file contents."""

    @property
    def name(self) -> str:
        return "exact"

    def can_analyse(self, path: str) -> bool:
        return True

    def open(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def __repr__(self):
        return "ExactComparator()"


class JsonComparator(ContentComparator):
    """
    Two JSON documents are identical when their canonical forms are.
    Whitespace and key order do not matter; raw size still has to match
    because buckets are keyed by the on-disk size.
    """
    EXTENSIONS = (".json",)

    @property
    def name(self) -> str:
        return "json"

    def can_analyse(self, path: str) -> bool:
        if os.path.splitext(path)[1].lower() not in self.EXTENSIONS:
            return False
        try:
            self.canonicalize(self._load(path))
        except (OSError, ValueError, RecursionError) as e:
            logger.debug("json comparator declines %s: %s", path, e)
            return False
        return True

    def open(self, path: str) -> BinaryIO:
        try:
            canonical = self.canonicalize(self._load(path))
        except (ValueError, RecursionError) as e:
            # UnicodeEncodeError (lone surrogates) is a ValueError too
            raise OSError(f"Cannot canonicalize {path}: {e}") from e
        return io.BytesIO(canonical)

    @staticmethod
    def canonicalize(document) -> bytes:
        return json.dumps(
            document,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")

    @staticmethod
    def _load(path: str):
        with open(path, "rb") as f:
            return json.load(f)

    def __repr__(self):
        return "JsonComparator()"


class ComparatorRegistry:
    """
    Ordered mapping name -> comparator.
    Registration order decides bucket processing order for files of equal size.
    """

    def __init__(self, comparators: Optional[List[ContentComparator]] = None):
        self._comparators: Dict[str, ContentComparator] = {}
        for comparator in comparators or []:
            self.register(comparator)

    def register(self, comparator: ContentComparator) -> None:
        name = comparator.name
        if not name:
            raise ConfigError(f"Comparator has no name: {comparator!r}")
        if name in self._comparators:
            raise ConfigError(f"Comparator already registered: {name}")
        self._comparators[name] = comparator

    def get(self, name: str) -> ContentComparator:
        try:
            return self._comparators[name]
        except KeyError:
            raise ConfigError(
                f"Unknown comparator: '{name}'. Available: {', '.join(self.names())}"
            ) from None

    def select(self, names: List[str]) -> "ComparatorRegistry":
        """Sub-registry with only the named comparators, in this registry's order."""
        for name in names:
            self.get(name)
        return ComparatorRegistry([c for n, c in self._comparators.items() if n in names])

    def names(self) -> List[str]:
        return list(self._comparators)

    def __iter__(self) -> Iterator[ContentComparator]:
        return iter(self._comparators.values())

    def __len__(self) -> int:
        return len(self._comparators)

    def __contains__(self, name: str) -> bool:
        return name in self._comparators

    def __repr__(self):
        return f"ComparatorRegistry({self.names()})"


def default_registry() -> ComparatorRegistry:
    """All built-in comparators. The scanner enables a subset via ScanParams.comparators."""
    return ComparatorRegistry([ExactComparator(), JsonComparator()])
