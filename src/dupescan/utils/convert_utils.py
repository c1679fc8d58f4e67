"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size conversions for --min-size and for the group headers.
Multiples are binary: 1K == 1KB == 1KiB == 1024 bytes.
"""
import re

SIZE_MULTIPLIERS = {
    "": 1,
    "K": 1024,
    "M": 1024 ** 2,
    "G": 1024 ** 3,
    "T": 1024 ** 4,
    "P": 1024 ** 5,
}

HUMAN_UNITS = ["KB", "MB", "GB", "TB", "PB"]

# "<number> <prefix><optional i><optional B>", e.g. 500, 1.5K, 2 MiB, 1024b
_SIZE_RE = re.compile(r"^(?P<number>\d+(?:\.\d+)?)\s*(?P<prefix>[KMGTP]?)(?:I?B)?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512B, 1.50KB, 3.20MB).
        Plain byte counts are printed whole.
        """
        if size_bytes < 0:
            return "0B"
        if size_bytes < 1024:
            return f"{size_bytes}B"

        value = float(size_bytes)
        for unit in HUMAN_UNITS:
            value /= 1024
            if value < 1024 or unit == HUMAN_UNITS[-1]:
                return f"{value:.2f}{unit}"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '2048KB', '1000', '1K', '2MiB', etc.
        A fraction needs a unit larger than a byte ('1.5K' is fine, '1.5' is not);
        the result is truncated to whole bytes.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = size_str.strip().upper()
        if text.startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str.strip()}'")

        match = _SIZE_RE.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str.strip()}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )

        number, prefix = match.group("number"), match.group("prefix")
        if not prefix:
            if "." in number:
                raise ValueError(f"Fractional byte count not allowed: '{size_str.strip()}'")
            return int(number)
        return int(float(number) * SIZE_MULTIPLIERS[prefix])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        """
        Check if the input string has a valid size format.
        """
        try:
            ConvertUtils.human_to_bytes(size_str)
            return True
        except ValueError:
            return False

    @staticmethod
    def bytes_each(size_bytes: int) -> str:
        """Exact size with thousands separators, e.g. '1,024 bytes each'."""
        unit = "byte" if size_bytes == 1 else "bytes"
        return f"{size_bytes:,} {unit} each"
