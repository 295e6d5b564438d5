#!/usr/bin/env python3
"""
Quarantiner CLI — Command line interface for moving duplicate files aside.
Keeps the first file found for each content and moves every other copy into an
output folder. Nothing is ever deleted; --dry-run shows the plan without moving.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from quarantiner.core.errors import SetupFailure
from quarantiner.core.models import (
    DigestAlgorithm, DuplicateGroup, FileState, QuarantineParams, RelocationOutcome, RunSummary)
from quarantiner.commands import QuarantineCommand
from quarantiner.utils.convert_utils import ConvertUtils
from quarantiner.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.group_index: int = 0

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="quarantiner",
            description="Quarantiner — move duplicate files into a separate folder",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            default=".",
            type=str,
            help="Directory to scan for duplicates. Default: current directory"
        )
        parser.add_argument(
            "--output", "-o",
            default="duplicated",
            type=str,
            dest="output_folder",
            help="Folder that receives duplicates. A relative path is placed inside\n"
                 "the scanned directory. Default: duplicated"
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default=DigestAlgorithm.default().value,
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--recurse", "-r",
            action="store_true",
            help="Descend into subdirectories"
        )
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            dest="dry_run",
            help="Report what would be moved without touching any file"
        )

        # Filtering options
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help="File extensions (space separated) to include (e.g., .jpg .png)"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: no limit"
        )
        parser.add_argument(
            "--max-size", "-M",
            default="",
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
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
            "--workers", "-w",
            default=1,
            type=int,
            metavar='',
            help="Number of threads used for hashing. Default: 1"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print the final summary and errors"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        root_path = Path(args.input).resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

        output_path = Path(args.output_folder)
        if not output_path.is_absolute():
            output_path = root_path / output_path
        if output_path.exists() and not output_path.is_dir():
            self.error_exit(f"Output path is not a directory: {output_path}")

        # Validate size formats
        for option, value in (("--min-size", args.min_size), ("--max-size", args.max_size)):
            if value and not ConvertUtils.is_valid_size_format(value):
                self.error_exit(f"Invalid size format for {option}: '{value}'")

        if args.workers < 1:
            self.error_exit("--workers must be at least 1")

        # Validate excluded directories
        for excl_dir in args.excluded_dirs:
            excl_path = Path(excl_dir).resolve()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> QuarantineParams:
        """Create QuarantineParams from CLI arguments."""
        try:
            min_size_bytes = ConvertUtils.human_to_bytes(args.min_size) if args.min_size else None
            max_size_bytes = ConvertUtils.human_to_bytes(args.max_size) if args.max_size else None

            # Normalize paths for consistency with core engine
            excluded_dirs = [str(Path(item.strip()).resolve()) for item in args.excluded_dirs]

            return QuarantineParams(
                root_dir=str(Path(args.input).resolve()),
                output_dir=args.output_folder,
                algorithm=ALGORITHM_ALIASES.get(args.algorithm, DigestAlgorithm.default()),
                recursive=args.recurse,
                dry_run=args.dry_run,
                extensions=args.extensions,
                excluded_dirs=excluded_dirs,
                min_size_bytes=min_size_bytes,
                max_size_bytes=max_size_bytes,
                workers=args.workers,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        if total is not None and current >= total:
            sys.stderr.write("\n")
        sys.stderr.flush()

    def print_group(self, group: DuplicateGroup, outcomes: List[RelocationOutcome]) -> None:
        """Report one duplicate group right after its duplicates were handled."""
        self.group_index += 1
        if self.quiet:
            return

        size_str = ConvertUtils.bytes_to_human(group.size)
        print(f"\n📁 Group {self.group_index} | Digest: {group.digest} | Size: {size_str} | Files: {len(group.files)}")
        print(f"   [KEEP] {group.original.path}")

        for outcome in outcomes:
            if not outcome.succeeded:
                print(f"   [FAIL] {outcome.record.path}: {outcome.error}")
            elif outcome.state == FileState.DUPLICATE_PLANNED:
                print(f"   [PLAN] {outcome.record.path} -> {outcome.destination}")
            else:
                print(f"   [MOVE] {outcome.record.path} -> {outcome.destination}")

    def output_summary(self, summary: RunSummary) -> None:
        """Final summary, printed even in quiet mode."""
        print()
        print("=" * 60)
        if summary.dry_run:
            print("Dry run: no files were moved.")
        print(f"Files scanned:      {summary.files_scanned}")
        if summary.dry_run:
            print(f"Duplicates to move: {summary.planned_moves}")
            print(f"Space that would be saved: {ConvertUtils.bytes_to_human(summary.planned_bytes)}")
        else:
            print(f"Duplicates moved:   {summary.duplicates_found}")
            print(f"Space saved:        {ConvertUtils.bytes_to_human(summary.space_saved_bytes)}")
        print(f"Output location:    {summary.output_location}")
        if summary.hash_failures:
            print(f"Unreadable files:   {summary.hash_failures}")
        if summary.move_failures:
            print(f"Failed moves:       {summary.move_failures}")

    def run_quarantine(self, params: QuarantineParams) -> RunSummary:
        """Execute the quarantine workflow."""
        command = QuarantineCommand()
        if self.verbose:
            print(f"Hashing with {params.algorithm.display_name}...")

        try:
            _, summary = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                group_callback=self.print_group
            )
        except SetupFailure as e:
            self.error_exit(str(e))
        except RuntimeError as e:
            self.error_exit(f"Quarantine failed: {e}")

        if self.group_index == 0 and not self.quiet:
            print("No duplicate groups found.")
        return summary

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    @staticmethod
    def configure_logging(verbose: bool, quiet: bool) -> None:
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        elif quiet:
            logging.getLogger().setLevel(logging.ERROR)

    def run(self, argv: Optional[List[str]] = None) -> RunSummary:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging(self.verbose, self.quiet)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            mode = " (dry run)" if params.dry_run else ""
            print(f"Scanning directory: {params.root_dir}{mode}")

        summary = self.run_quarantine(params)
        self.output_summary(summary)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")
        return summary


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
