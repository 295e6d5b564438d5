"""
Quarantiner — moves duplicate files into a quarantine folder.

Core features:
- Content digests: MD5, SHA-1, SHA-256 (default) or xxHash64
- First file found for each content is kept in place, the rest are moved
- Collision-free names in the output folder (x.txt, x_1.txt, x_2.txt ...)
- Dry-run mode that reports the plan without touching the filesystem
- CLI interface for interactive and scripted usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("quarantiner")
except PackageNotFoundError:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli
    from pathlib import Path as _Path

    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from quarantiner.commands import QuarantineCommand
from quarantiner.core import (
    QuarantineParams, DigestAlgorithm, FileRecord, DuplicateGroup, RunSummary,
    SetupFailure, HashFailure, MoveFailure)
from quarantiner.utils.convert_utils import ConvertUtils
from quarantiner.services import FileService

__all__ = [
    "QuarantineCommand",
    "QuarantineParams",
    "DigestAlgorithm",
    "FileRecord",
    "DuplicateGroup",
    "RunSummary",
    "SetupFailure",
    "HashFailure",
    "MoveFailure",
    "ConvertUtils",
    "FileService",
    "__version__",
]
