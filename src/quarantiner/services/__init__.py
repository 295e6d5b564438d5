"""Filesystem operations used by the relocator."""

from .file_service import FileService

__all__ = ["FileService"]
