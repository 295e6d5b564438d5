"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the quarantine pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so that
scanner, grouper and relocator can be swapped or faked in tests.

Key Components:
---------------
- HashAlgorithm: Incremental digest factory (e.g., SHA-256, MD5, xxHash).
- Hasher: Computes the content digest of a single file.
- FileScanner: Walks a directory tree and returns hashed file records.
- FileGrouper: Partitions records into duplicate groups.
- Relocator: Moves (or simulates moving) duplicates into the output folder.
"""

from typing import Protocol, List, Tuple, Optional, Callable, Any
from quarantiner.core.models import (
    DuplicateGroup,
    FileRecord,
    RelocationOutcome,
    RunSummary,
    ScanResult,
)


# ===== Interfaces =====

class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    new() must return an object with update(bytes) and hexdigest(),
    the shape shared by hashlib and xxhash objects.
    """
    name: str

    def new(self) -> Any:
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_digest(self, path: str) -> str: ...


class FileScanner(Protocol):
    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> ScanResult:
        """
        Scan files from the configured directory.

        Args:
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            ScanResult with hashed records, the number of files considered and the failures.
        """
        ...


class FileGrouper(Protocol):
    def group(self, records: List[FileRecord]) -> List[DuplicateGroup]:
        """Group records by digest, keeping only groups with 2+ files."""
        ...


class Relocator(Protocol):
    def relocate_group(self, group: DuplicateGroup) -> List[RelocationOutcome]:
        """Relocate every non-original member of one group."""
        ...

    def relocate(
        self,
        groups: List[DuplicateGroup],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[RelocationOutcome], RunSummary]:
        ...
