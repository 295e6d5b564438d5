"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/relocator.py
Moves every duplicate (all group members except the original) into the output folder.

STATE TRANSITIONS
-----------------
DUPLICATE_PENDING → DUPLICATE_MOVED   : file now lives in the output folder
DUPLICATE_PENDING → DUPLICATE_FAILED  : move failed, file left in place
DUPLICATE_PENDING → DUPLICATE_PLANNED : dry-run, nothing touched

Counters are never shared: each outcome yields a partial RunSummary and the
partials are folded with RunSummary.combine().
"""

import logging
import os
import threading
from functools import reduce
from typing import List, Optional, Callable, Tuple, Set

from quarantiner.core.errors import MoveFailure
from quarantiner.core.interfaces import Relocator
from quarantiner.core.models import (
    DuplicateGroup, FileRecord, FileState, RelocationOutcome, RunSummary)
from quarantiner.core.namer import unique_name
from quarantiner.services.file_service import FileService

logger = logging.getLogger(__name__)


class RelocatorImpl(Relocator):
    """
    Relocates duplicates into a single output folder.

    Name resolution and the move happen under one lock, so two duplicates with
    the same basename can never be given the same destination.
    """

    def __init__(self, output_dir: str, dry_run: bool = False, file_service: Optional[FileService] = None):
        self.output_dir = os.path.abspath(output_dir)
        self.dry_run = dry_run
        self.file_service = file_service or FileService()
        self._lock = threading.Lock()
        self._planned_names: Set[str] = set()  # dry-run reservations

    def relocate_group(self, group: DuplicateGroup) -> List[RelocationOutcome]:
        """Relocate the duplicates of one group. The original is never touched."""
        return [self._relocate_one(record) for record in group.duplicates]

    def relocate(
        self,
        groups: List[DuplicateGroup],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[RelocationOutcome], RunSummary]:
        outcomes: List[RelocationOutcome] = []
        summaries: List[RunSummary] = []
        total = sum(len(g.duplicates) for g in groups)

        for group in groups:
            if stopped_flag and stopped_flag():
                logger.debug("Relocation interrupted by user")
                break

            group_outcomes = self.relocate_group(group)
            outcomes.extend(group_outcomes)
            summaries.append(self.summarize(group, group_outcomes))

            if progress_callback:
                progress_callback('relocating', len(outcomes), total)

        summary = reduce(RunSummary.combine, summaries, RunSummary(dry_run=self.dry_run))
        return outcomes, summary.with_location(self.output_dir)

    @staticmethod
    def summarize(group: DuplicateGroup, outcomes: List[RelocationOutcome]) -> RunSummary:
        """
        Partial summary for one group.
        Space saved uses the original's size for every relocated member.
        """
        return reduce(
            RunSummary.combine,
            (RunSummary.from_outcome(outcome, group.size) for outcome in outcomes),
            RunSummary(),
        )

    def _relocate_one(self, record: FileRecord) -> RelocationOutcome:
        with self._lock:
            dest_name = unique_name(self.output_dir, record.name, taken=self._planned_names)
            destination = os.path.join(self.output_dir, dest_name)

            if self.dry_run:
                self._planned_names.add(dest_name)
                logger.info(f"[dry-run] Would move {record.path} -> {destination}")
                return RelocationOutcome(record, destination, FileState.DUPLICATE_PLANNED)

            try:
                self.file_service.move_file(record.path, destination)
            except MoveFailure as e:
                logger.error(str(e))
                return RelocationOutcome(record, destination, FileState.DUPLICATE_FAILED, error=str(e.cause))

        logger.debug(f"Moved {record.path} -> {destination}")
        return RelocationOutcome(record, destination, FileState.DUPLICATE_MOVED)
