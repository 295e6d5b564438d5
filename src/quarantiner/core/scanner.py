"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file scanning and hashing using pathlib and os.walk.
Features:
- Scans only the root directory, or the whole tree when recursive
- Skips excluded directories (the output folder is always one of them)
- Applies optional size and extension filters
- Hashes every candidate; unreadable files are reported and skipped
- Returns a ScanResult with records in a stable, sorted traversal order
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Callable, Tuple, Union
from pathlib import Path
import time
import logging

logger = logging.getLogger(__name__)

# Local imports
from quarantiner.core.errors import HashFailure
from quarantiner.core.hasher import HasherImpl
from quarantiner.core.interfaces import FileScanner, Hasher
from quarantiner.core.models import DigestAlgorithm, FileRecord, ScanResult


class FileScannerImpl(FileScanner):
    """
    Walks a directory, filters candidate files and hashes each of them.

    Attributes:
        root_dir: Root directory to scan
        recursive: Descend into subdirectories
        excluded_dirs: Directories (or files) never scanned, compared by path containment
        hasher: Hasher used for every candidate file
        extensions: List of allowed file extensions (e.g., [".txt", ".jpg"])
        min_size: Minimum file size in bytes (optional)
        max_size: Maximum file size in bytes (optional)
        workers: Number of hashing threads
    """

    def __init__(
        self,
        root_dir: str,
        recursive: bool = False,
        excluded_dirs: Optional[List[str]] = None,
        hasher: Optional[Hasher] = None,
        extensions: Optional[List[str]] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        workers: int = 1
    ):
        self.root_dir = root_dir
        self.recursive = recursive
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.hasher = hasher or HasherImpl.for_algorithm(DigestAlgorithm.default())
        self.extensions = [ext.lower() for ext in extensions] if extensions else []
        self.min_size = min_size
        self.max_size = max_size
        self.workers = max(1, workers)

    def scan(self,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None) -> ScanResult:
        """
        Collect candidate files, then hash them.
        Hash failures are logged and counted but never abort the scan.
        """
        logger.debug("Starting scan operation")
        logger.debug(f"Root directory: {self.root_dir} (recursive={self.recursive})")
        logger.debug(f"Excluded: {self.excluded_dirs}")

        root_path = Path(os.path.abspath(self.root_dir))

        # Validate root directory exists and is accessible
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        start_time = time.time()
        candidates = self._collect_candidates(root_path, stopped_flag)
        result = self._hash_candidates(candidates, stopped_flag, progress_callback)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(
            f"Scan completed. {result.files_scanned} files scanned, "
            f"{len(result.records)} hashed, {len(result.failures)} failed."
        )
        return result

    def _collect_candidates(
            self,
            root_path: Path,
            stopped_flag: Optional[Callable[[], bool]] = None) -> List[Tuple[Path, int]]:
        """Walk the tree and return (path, size) for every file that passes the filters."""
        candidates = []

        def on_walk_error(error: OSError):
            logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

        for root, dirs, files in os.walk(str(root_path), onerror=on_walk_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                break

            if self.recursive:
                # Pre-filter subdirectories BEFORE os.walk enters them
                dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(root) / d))
            else:
                dirs[:] = []

            for filename in sorted(files):
                path = Path(root) / filename
                size = self._candidate_size(path)
                if size is not None:
                    candidates.append((path, size))

        return candidates

    def _hash_candidates(
            self,
            candidates: List[Tuple[Path, int]],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None) -> ScanResult:
        """Hash candidates (optionally in parallel) and keep their original order."""
        result = ScanResult()
        total = len(candidates)

        def hash_one(candidate: Tuple[Path, int]) -> Union[FileRecord, HashFailure, None]:
            if stopped_flag and stopped_flag():
                return None
            path, size = candidate
            try:
                digest = self.hasher.compute_digest(str(path))
            except HashFailure as e:
                return e
            return FileRecord(path=str(path), size=size, digest=digest)

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = executor.map(hash_one, candidates)
                self._collect_outcomes(outcomes, result, total, progress_callback)
        else:
            self._collect_outcomes(map(hash_one, candidates), result, total, progress_callback)

        return result

    @staticmethod
    def _collect_outcomes(outcomes, result: ScanResult, total: int,
                          progress_callback: Optional[Callable[[str, int, object], None]]) -> None:
        for outcome in outcomes:
            if outcome is None:
                # Cancelled before this file was read
                continue
            result.files_scanned += 1
            if isinstance(outcome, HashFailure):
                logger.warning(f"Skipping unreadable file {outcome.path}: {outcome.cause}")
                result.failures.append(outcome.path)
            else:
                result.records.append(outcome)
            if progress_callback:
                progress_callback('hashing', result.files_scanned, total)

    @staticmethod
    def _is_excluded(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is, or is inside, one of the excluded paths."""
        try:
            path_str = str(path.resolve(strict=False))
            for excluded_dir in excluded_dirs:
                normalized_excluded = os.path.normpath(excluded_dir)
                if path_str.startswith(normalized_excluded.rstrip(os.sep) + os.sep) or \
                        path_str == normalized_excluded:
                    return True
            return False
        except (OSError, ValueError):
            return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Pre-filter directories: skip excluded, symlinked and inaccessible locations."""
        if self.excluded_dirs and self._is_excluded(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return False
            if not os.access(path, os.R_OK | os.X_OK):
                logger.warning(f"Skipping inaccessible directory: {path}")
                return False
            return path.is_dir()
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    def _candidate_size(self, path: Path) -> Optional[int]:
        """
        Return the size of a regular file that should be hashed, or None to skip it.
        """
        if self.excluded_dirs and self._is_excluded(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded file: {path}")
            return None

        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            if not path.is_file():
                logger.debug(f"Skipping non-regular file: {path}")
                return None
            size = path.stat().st_size
        except OSError as e:
            logger.warning(f"Could not stat {path}: {e}")
            return None

        if not self._size_passes(size):
            logger.debug(f"Skipping {path} (size {size} bytes outside range)")
            return None

        if not self._extension_passes(path):
            logger.debug(f"Skipping {path} (extension not allowed)")
            return None

        return size

    def _size_passes(self, size: int) -> bool:
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def _extension_passes(self, path: Path) -> bool:
        if not self.extensions:
            return True
        ext = path.suffix.lower()
        return any(ext == allowed_ext for allowed_ext in self.extensions)
