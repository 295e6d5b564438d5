"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Failures raised while setting up, hashing and relocating.

Only SetupFailure aborts a run. HashFailure and MoveFailure are caught per file,
logged, and the run carries on with the next file.
"""


class SetupFailure(RuntimeError):
    """The output folder could not be created."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot create output folder {path}: {cause}")


class HashFailure(RuntimeError):
    """A file could not be read while computing its digest."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to hash {path}: {cause}")


class MoveFailure(RuntimeError):
    """A duplicate could not be relocated; it stays where it was."""

    def __init__(self, path: str, destination: str, cause: BaseException):
        self.path = path
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to move {path} -> {destination}: {cause}")
