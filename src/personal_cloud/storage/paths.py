"""
Validation of user-supplied folder / file names against the storage root.

This is the only place where untrusted names become filesystem paths:

    <storage_root>/<folder>
    <storage_root>/<folder>/<file>
    <storage_root>/<file>
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from .errors import InvalidPathError


PARENT_TOKEN = ".."

# Characters that can never appear in a single name segment.
_ALWAYS_INVALID = frozenset("\0/\\")

# Extra characters rejected by Windows filesystems.
_WINDOWS_INVALID = frozenset('<>:"|?*') | frozenset(chr(c) for c in range(32))


def _invalid_chars() -> frozenset[str]:
    if os.name == "nt":
        return _ALWAYS_INVALID | _WINDOWS_INVALID
    return _ALWAYS_INVALID


def validate_name(segment: Optional[str], *, kind: str = "name") -> str:
    """
    Validate a single folder or file name segment.

    Args:
        segment: The raw name supplied by the caller.
        kind: Label used in error messages ("folder", "file", ...).

    Returns:
        The segment, unchanged.

    Raises:
        InvalidPathError: If the segment is empty, whitespace-only, contains
            the parent-directory token or a character invalid in a name.
    """
    if segment is None or not segment.strip():
        raise InvalidPathError(f"Invalid {kind} name: empty")
    if PARENT_TOKEN in segment:
        raise InvalidPathError(f"Invalid {kind} name: {segment!r}")
    if segment == ".":
        raise InvalidPathError(f"Invalid {kind} name: {segment!r}")

    bad = _invalid_chars().intersection(segment)
    if bad:
        raise InvalidPathError(f"Invalid {kind} name: {segment!r}")
    return segment


class PathResolver:
    """Resolves one or two name segments to a path confined to the root."""

    def __init__(self, root: Path):
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, *segments: str) -> Path:
        """
        Build an absolute path under the root from validated segments.

        Args:
            segments: A folder name, optionally followed by a file name;
                or a single file name for root-level files.

        Returns:
            ``root / segment1 [/ segment2]``.

        Raises:
            InvalidPathError: On any invalid segment, or if the composed path
                escapes the root once symlinks are resolved.
        """
        if not 1 <= len(segments) <= 2:
            raise InvalidPathError("Expected a folder and/or file name")

        path = self._root
        for segment in segments:
            path = path / validate_name(segment)

        # Drive letters / absolute names would survive the checks above on
        # some platforms; the resolved location is the final authority.
        resolved = path.resolve()
        if resolved != self._root and self._root not in resolved.parents:
            raise InvalidPathError(f"Path escapes storage root: {'/'.join(segments)!r}")
        if len(resolved.relative_to(self._root).parts) != len(segments):
            raise InvalidPathError(f"Path escapes storage root: {'/'.join(segments)!r}")
        return path

    def resolve_folder(self, folder: str) -> Path:
        return self.resolve(folder)

    def resolve_file(self, file_name: str, folder: Optional[str] = None) -> Path:
        """Resolve a file inside ``folder``, or directly under the root when None."""
        if folder is None:
            return self.resolve(file_name)
        return self.resolve(folder, file_name)
