"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem side effects of a quarantine run: creating the output folder and
moving duplicates into it, across filesystems when needed.
"""
import errno
import logging
import os
import shutil
from pathlib import Path

from quarantiner.core.errors import MoveFailure, SetupFailure

logger = logging.getLogger(__name__)


class FileService:
    """
    Cross-platform file operations used by the relocator.
    Every failure is re-raised as one of the domain errors with the cause attached.
    """

    @staticmethod
    def ensure_directory(dir_path: str) -> Path:
        """Create the output folder (and parents) if it does not exist yet."""
        path = Path(dir_path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SetupFailure(str(path), e) from e

        if not path.is_dir():
            raise SetupFailure(str(path), NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path)))
        return path.resolve()

    @staticmethod
    def move_file(source: str, destination: str) -> None:
        """
        Move a file, falling back to copy + delete when rename cannot cross devices.
        The source is removed only after the copy is complete and has the same size.
        """
        src = Path(source)

        if not src.exists():
            raise MoveFailure(source, destination, FileNotFoundError(errno.ENOENT, "File not found", source))

        # rename and copy2 overwrite silently; the name must still be free here
        if os.path.lexists(destination):
            raise MoveFailure(source, destination, FileExistsError(errno.EEXIST, "Destination already exists", destination))

        try:
            os.rename(source, destination)
            return
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise MoveFailure(source, destination, e) from e
            logger.debug(f"Cross-device move, copying instead: {source} -> {destination}")

        FileService._copy_then_delete(source, destination)

    @staticmethod
    def _copy_then_delete(source: str, destination: str) -> None:
        try:
            shutil.copy2(source, destination)
            expected = os.path.getsize(source)
            copied = os.path.getsize(destination)
            if copied != expected:
                raise OSError(errno.EIO, f"Incomplete copy ({copied} of {expected} bytes)", destination)
        except OSError as e:
            FileService._discard_partial_copy(destination)
            raise MoveFailure(source, destination, e) from e

        try:
            os.unlink(source)
        except OSError as e:
            # Source still in place: drop the copy so the file is not duplicated again
            FileService._discard_partial_copy(destination)
            raise MoveFailure(source, destination, e) from e

    @staticmethod
    def _discard_partial_copy(destination: str) -> None:
        try:
            os.unlink(destination)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial copy {destination}: {e}")
