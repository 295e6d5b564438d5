"""
Core engine — hasher, scanner, grouper, namer and relocator.

This package contains the whole decision logic of quarantiner:
- HasherImpl: streaming full-content digests (MD5, SHA-1, SHA-256, xxHash64)
- FileScannerImpl: directory traversal with output-folder exclusion and per-file error tolerance
- FileGrouperImpl: digest grouping with first-seen precedence
- unique_name: collision-free naming inside the output folder
- RelocatorImpl: moves or simulates moving duplicates and folds the run summary
- Models: FileRecord, DuplicateGroup, RunSummary and configuration objects

No console or argument-parsing code lives here.
"""

from .errors import SetupFailure, HashFailure, MoveFailure
from .hasher import HasherImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl, hash_file
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .namer import split_name, unique_name
from .relocator import RelocatorImpl
from .models import (
    DigestAlgorithm, FileRecord, DuplicateGroup, FileState, RelocationOutcome,
    RunSummary, ScanResult, QuarantineParams)

__all__ = [
    "SetupFailure",
    "HashFailure",
    "MoveFailure",
    "HasherImpl",
    "HashlibAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "hash_file",
    "FileScannerImpl",
    "FileGrouperImpl",
    "split_name",
    "unique_name",
    "RelocatorImpl",
    "DigestAlgorithm",
    "FileRecord",
    "DuplicateGroup",
    "FileState",
    "RelocationOutcome",
    "RunSummary",
    "ScanResult",
    "QuarantineParams",
]
