#!/usr/bin/env python3
"""
dupescan CLI — Command line interface for duplicate file detection and removal.
Lists duplicate groups as they are found (largest files first), or lets the user
pick survivors per group, or keeps one file per group automatically.
Deletion moves files to the system trash unless --permanent is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import threading
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install dupescan", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupescan.core.errors import ConfigError, DupeScanError
from dupescan.core.interfaces import DuplicateGroupReceiver
from dupescan.core.models import ScanParams, ScanStats
from dupescan.commands import DuplicateScanCommand
from dupescan.receivers import ListingReceiver, PromptReceiver, KeepOneReceiver
from dupescan.aliases import COMPARATOR_CHOICES, COMPARATOR_HELP_TEXT, EPILOG_TEXT
from dupescan.utils.convert_utils import ConvertUtils

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop = threading.Event()

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupescan",
            description="dupescan — find duplicate files, largest first",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "roots",
            nargs="+",
            metavar="DIRECTORY",
            help="Directories to scan for duplicates"
        )

        # Filtering options
        parser.add_argument(
            "--non-recursive", "-n",
            action="store_true",
            help="Only scan the top level of each directory"
        )
        parser.add_argument(
            "--include-empty", "-0",
            action="store_true",
            help="Include zero-length files (excluded by default)"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )
        parser.add_argument(
            "--comparator", "-c",
            action="append",
            choices=COMPARATOR_CHOICES,
            dest="comparators",
            help=COMPARATOR_HELP_TEXT
        )

        # Actions
        actions = parser.add_mutually_exclusive_group()
        actions.add_argument(
            "--prompt", "-p",
            action="store_true",
            help="Ask which files to preserve in every group, remove the rest"
        )
        actions.add_argument(
            "--keep-one",
            action="store_true",
            help="Keep one file per duplicate group and remove the rest. "
                 "Always shows preview before deletion for safety."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --keep-one (for automation/scripts)"
        )
        parser.add_argument(
            "--permanent",
            action="store_true",
            help="Delete files permanently instead of moving them to trash"
        )

        # Output options
        parser.add_argument(
            "--show-sizes", "-S",
            action="store_true",
            help="Show the size of the files in every duplicate group"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )
        parser.add_argument(
            "--log-level",
            choices=LOG_LEVELS,
            type=str.upper,
            default=None,
            help="Logging level (default: ERROR, INFO with --verbose)"
        )

        return parser.parse_args(args)

    def configure_logging(self, args: argparse.Namespace) -> None:
        level = args.log_level or ("INFO" if args.verbose else "ERROR")
        logging.getLogger().setLevel(level)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.keep_one:
            self.error_exit("--force can only be used with --keep-one")

        if args.permanent and not (args.keep_one or args.prompt):
            self.error_exit("--permanent can only be used with --keep-one or --prompt")

        # Prevent interactive confirmation in non-TTY environments
        if args.keep_one and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(
                f"Invalid --min-size value: '{args.min_size}'. "
                f"Use a whole number of bytes or a unit, e.g. 500, 1.5K, 2MB"
            )

        for root in args.roots:
            root_path = Path(root).resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {root}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {root}")

        # Validate excluded directories
        for excl_dir in args.excluded_dirs:
            excl_path = Path(excl_dir).resolve()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            # Normalize paths for consistency with core engine
            roots = [str(Path(root).resolve()) for root in args.roots]
            excluded_dirs = [str(Path(item.strip()).resolve()) for item in args.excluded_dirs]

            return ScanParams.from_human_readable(
                roots=roots,
                min_size_str=args.min_size,
                recursive=not args.non_recursive,
                include_empty=args.include_empty,
                comparators=args.comparators or ["exact"],
                excluded_dirs=excluded_dirs,
            )
        except ConfigError as e:
            self.error_exit(f"Parameter error: {e}")

    @staticmethod
    def create_receiver(args: argparse.Namespace) -> DuplicateGroupReceiver:
        """Pick the receiver for the requested action."""
        if args.prompt:
            return PromptReceiver(show_sizes=args.show_sizes, permanent=args.permanent)
        if args.keep_one:
            return KeepOneReceiver(force=args.force, permanent=args.permanent, verbose=args.verbose)
        return ListingReceiver(show_sizes=args.show_sizes)

    def progress_callback(self, event: str, data: dict) -> None:
        """CLI progress listener - shows bucket progress in console."""
        if event != "bucket":
            return
        total = data["total"]
        percent = (data["index"] / total) * 100 if total else 100.0
        sys.stderr.write(f"\r  [matching] {data['index']}/{total} ({percent:.1f}%)")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """Check if operation should stop."""
        return self._stop.is_set()

    def run_scan(self, params: ScanParams, receiver: DuplicateGroupReceiver) -> ScanStats:
        """Execute the scan, streaming groups to the receiver."""
        command = DuplicateScanCommand()
        try:
            stats = command.execute(
                params, receiver,
                stopped_flag=self.stopped_flag,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except KeyboardInterrupt:
            self._stop.set()
            raise
        except DupeScanError as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            print("\n" + stats.print_summary(), file=sys.stderr)
        return stats

    def report(self, receiver: DuplicateGroupReceiver) -> None:
        """Closing line for the listing output."""
        if self.quiet or not isinstance(receiver, ListingReceiver):
            return
        print(receiver.summary(), file=sys.stderr)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging(args)

        self.validate_args(args)
        params = self.create_params(args)
        receiver = self.create_receiver(args)

        if not self.quiet:
            print(f"Scanning: {', '.join(params.roots)}", file=sys.stderr)

        self.run_scan(params, receiver)
        self.report(receiver)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run(argv)
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
