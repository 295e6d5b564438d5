"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, duplicate grouping and relocation.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional
import os
from enum import Enum


# =============================
# Enums
# =============================

class DigestAlgorithm(Enum):
    """
    Content digest used to decide whether two files are identical.
    """
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    XXH64 = "xxh64"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            DigestAlgorithm.MD5: "MD5",
            DigestAlgorithm.SHA1: "SHA-1",
            DigestAlgorithm.SHA256: "SHA-256",
            DigestAlgorithm.XXH64: "xxHash64",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            DigestAlgorithm.MD5: "128-bit, fast, weakest collision resistance",
            DigestAlgorithm.SHA1: "160-bit, balanced",
            DigestAlgorithm.SHA256: "256-bit, strongest, slowest (default)",
            DigestAlgorithm.XXH64: "64-bit non-cryptographic, fastest",
        }
        return mapping.get(self, self.value)

    @classmethod
    def default(cls) -> "DigestAlgorithm":
        return cls.SHA256

    def __repr__(self) -> str:
        return self.value


class FileState(Enum):
    """Lifecycle of a single file during one run."""
    SCANNED = "scanned"
    UNIQUE = "unique"
    ORIGINAL = "original"
    DUPLICATE_PENDING = "duplicate-pending"
    DUPLICATE_PLANNED = "duplicate-planned"  # dry-run only
    DUPLICATE_MOVED = "duplicate-moved"
    DUPLICATE_FAILED = "duplicate-failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (FileState.SCANNED, FileState.DUPLICATE_PENDING)


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    A successfully hashed file.
    Created once by the scanner and never mutated afterwards.
    """
    path: str  # absolute
    size: int  # in bytes
    digest: str  # hex

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing one digest, kept in discovery order.
    The first file is the original and is never relocated.
    """
    digest: str
    files: List[FileRecord]

    @property
    def original(self) -> FileRecord:
        return self.files[0]

    @property
    def duplicates(self) -> List[FileRecord]:
        return self.files[1:]

    @property
    def size(self) -> int:
        """Size of the original; all members match when digests match."""
        return self.files[0].size if self.files else 0

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    def state_of(self, record: FileRecord) -> FileState:
        """Classification of a member before any relocation happens."""
        if record not in self.files:
            raise ValueError(f"{record.path} is not a member of this group")
        if record == self.original:
            return FileState.ORIGINAL
        return FileState.DUPLICATE_PENDING

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest[:12]}, count={len(self.files)}>"


@dataclass
class ScanResult:
    """What the scanner hands over to the grouper."""
    records: List[FileRecord] = field(default_factory=list)
    files_scanned: int = 0
    failures: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RelocationOutcome:
    """Result of handling one duplicate."""
    record: FileRecord
    destination: str
    state: FileState
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """Moved, or planned in a dry run."""
        return self.state in (FileState.DUPLICATE_MOVED, FileState.DUPLICATE_PLANNED)


@dataclass(frozen=True)
class RunSummary:
    """
    Totals for one run.
    Stages return partial summaries which are folded together with combine().
    """
    files_scanned: int = 0
    duplicates_found: int = 0
    space_saved_bytes: int = 0
    output_location: str = ""
    hash_failures: int = 0
    move_failures: int = 0
    planned_moves: int = 0  # dry-run only, never counted as moved
    planned_bytes: int = 0
    dry_run: bool = False

    def combine(self, other: "RunSummary") -> "RunSummary":
        return RunSummary(
            files_scanned=self.files_scanned + other.files_scanned,
            duplicates_found=self.duplicates_found + other.duplicates_found,
            space_saved_bytes=self.space_saved_bytes + other.space_saved_bytes,
            output_location=self.output_location or other.output_location,
            hash_failures=self.hash_failures + other.hash_failures,
            move_failures=self.move_failures + other.move_failures,
            planned_moves=self.planned_moves + other.planned_moves,
            planned_bytes=self.planned_bytes + other.planned_bytes,
            dry_run=self.dry_run or other.dry_run,
        )

    def __add__(self, other: "RunSummary") -> "RunSummary":
        return self.combine(other)

    @staticmethod
    def from_outcome(outcome: RelocationOutcome, size: int) -> "RunSummary":
        """
        Partial summary contributed by a single relocation.
        Only DUPLICATE_MOVED adds to duplicates_found and space_saved_bytes.
        """
        if outcome.state == FileState.DUPLICATE_MOVED:
            return RunSummary(duplicates_found=1, space_saved_bytes=size)
        if outcome.state == FileState.DUPLICATE_PLANNED:
            return RunSummary(planned_moves=1, planned_bytes=size, dry_run=True)
        if outcome.state == FileState.DUPLICATE_FAILED:
            return RunSummary(move_failures=1)
        return RunSummary()

    def with_location(self, output_location: str) -> "RunSummary":
        return replace(self, output_location=output_location)


"""
DTO for quarantine parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""
from quarantiner.utils.convert_utils import ConvertUtils


@dataclass
class QuarantineParams:
    """Parameters for a quarantine run with validation."""
    root_dir: str
    output_dir: str = "duplicated"
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    recursive: bool = False
    dry_run: bool = False
    extensions: List[str] = field(default_factory=list)
    excluded_dirs: List[str] = field(default_factory=list)
    min_size_bytes: Optional[int] = None
    max_size_bytes: Optional[int] = None
    workers: int = 1

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if not self.output_dir:
            raise ValueError("Output folder cannot be empty")

        if self.min_size_bytes is not None and self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if (self.min_size_bytes is not None and self.max_size_bytes is not None
                and self.max_size_bytes < self.min_size_bytes):
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers < 1:
            raise ValueError("Workers must be at least 1")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @property
    def output_path(self) -> str:
        """Absolute output folder; relative folders live under the scan root."""
        if os.path.isabs(self.output_dir):
            return os.path.normpath(self.output_dir)
        return os.path.normpath(os.path.join(os.path.abspath(self.root_dir), self.output_dir))

    @staticmethod
    def from_human_readable(
            root_dir: str,
            output_dir: str = "duplicated",
            algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
            recursive: bool = False,
            dry_run: bool = False,
            extensions_str: str = "",
            min_size_str: str = "",
            max_size_str: str = "",
            excluded_dirs: Optional[List[str]] = None,
            workers: int = 1,
    ) -> 'QuarantineParams':
        """
        Factory method to create params from human-readable inputs.
        Empty size strings mean "no limit".
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str) if min_size_str else None
        max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else []

        return QuarantineParams(
            root_dir=root_dir,
            output_dir=output_dir,
            algorithm=algorithm,
            recursive=recursive,
            dry_run=dry_run,
            extensions=ext_list,
            excluded_dirs=excluded_dirs or [],
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            workers=workers,
        )
