"""
Unified command orchestrator for a quarantine run.
This is the SINGLE source of truth for business logic — used by the CLI and by library callers.
"""
import logging
from typing import Dict, List, Optional, Callable, Tuple

from quarantiner.core.grouper import FileGrouperImpl
from quarantiner.core.hasher import HasherImpl
from quarantiner.core.models import (
    DuplicateGroup, FileRecord, FileState, QuarantineParams, RelocationOutcome, RunSummary)
from quarantiner.core.relocator import RelocatorImpl
from quarantiner.core.scanner import FileScannerImpl
from quarantiner.services.file_service import FileService

logger = logging.getLogger(__name__)

GroupCallback = Callable[[DuplicateGroup, List[RelocationOutcome]], None]


class QuarantineCommand:
    """
    Orchestrates the entire workflow:
    1. Create the output folder (skipped in dry-run)
    2. Scan and hash files under the root, excluding the output folder
    3. Group records by digest
    4. Relocate every duplicate, reporting each group as it is done

    Usage:
        params = QuarantineParams(root_dir="~/Downloads", recursive=True)
        command = QuarantineCommand()
        groups, summary = command.execute(
            params,
            progress_callback=cli_progress_printer,
            group_callback=cli_group_printer,
        )

    Raises:
        SetupFailure: the output folder cannot be created
        RuntimeError: the root directory is missing or not a directory
    """

    def __init__(self, file_service: Optional[FileService] = None):
        self._file_service = file_service or FileService()
        self._grouper = FileGrouperImpl()
        self._records: List[FileRecord] = []
        self._outcomes: List[RelocationOutcome] = []
        self._states: Dict[str, FileState] = {}

    def execute(
            self,
            params: QuarantineParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            group_callback: Optional[GroupCallback] = None
    ) -> Tuple[List[DuplicateGroup], RunSummary]:
        output_path = params.output_path

        # Step 1: Setup (only SetupFailure is fatal)
        if not params.dry_run:
            output_path = str(self._file_service.ensure_directory(output_path))

        # Step 2: Scan and hash
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            recursive=params.recursive,
            excluded_dirs=[output_path] + list(params.excluded_dirs),
            hasher=HasherImpl.for_algorithm(params.algorithm),
            extensions=params.extensions,
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            workers=params.workers,
        )
        scan_result = scanner.scan(stopped_flag=stopped_flag, progress_callback=progress_callback)
        self._records = scan_result.records

        # Step 3: Group
        groups = self._grouper.group(scan_result.records)
        self._states = self._grouper.classify(scan_result.records, groups)
        logger.debug(f"{len(groups)} duplicate groups among {len(scan_result.records)} files")

        # Step 4: Relocate, one group at a time so callers can report inline
        relocator = RelocatorImpl(output_path, dry_run=params.dry_run, file_service=self._file_service)
        summary = RunSummary(
            files_scanned=scan_result.files_scanned,
            hash_failures=len(scan_result.failures),
            output_location=relocator.output_dir,
            dry_run=params.dry_run,
        )
        self._outcomes = []

        for index, group in enumerate(groups, 1):
            if stopped_flag and stopped_flag():
                logger.debug("Run interrupted by user")
                break
            outcomes = relocator.relocate_group(group)
            self._outcomes.extend(outcomes)
            self._states.update((outcome.record.path, outcome.state) for outcome in outcomes)
            summary = summary.combine(relocator.summarize(group, outcomes))
            if group_callback:
                group_callback(group, outcomes)
            if progress_callback:
                progress_callback('relocating', index, len(groups))

        return groups, summary

    def get_records(self) -> List[FileRecord]:
        """Get hashed records after execution."""
        return self._records.copy()  # Return copy to prevent external mutation

    def get_outcomes(self) -> List[RelocationOutcome]:
        return self._outcomes.copy()

    def get_states(self) -> Dict[str, FileState]:
        """Final state of every hashed file, keyed by path."""
        return dict(self._states)
