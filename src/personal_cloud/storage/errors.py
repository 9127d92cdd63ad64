"""
Error taxonomy for the file-storage engine.

All of these are caller-input errors; none is transient. Unexpected
filesystem failures (permissions, disk full) are not wrapped and propagate
as plain OSError.
"""

from __future__ import annotations


class StorageError(RuntimeError):
    """Base class for errors caused by the caller's input."""
    pass


class InvalidPathError(StorageError):
    """A folder or file name failed traversal / character validation."""
    pass


class InvalidParametersError(StorageError):
    """Malformed pagination, sort or filter inputs."""
    pass


class InvalidUploadError(StorageError):
    """Missing or empty upload payload."""
    pass


class NotFoundError(StorageError):
    """The referenced file or folder does not exist."""
    pass


class ConflictError(StorageError):
    """A folder with the requested name already exists."""
    pass
