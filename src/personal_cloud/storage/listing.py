"""
File listing over the storage root.

Enumerates FileRecords for a scope and hands them to the pure listing
engine (src.shared.listing) for filtering, sorting and pagination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from src.shared.listing import DEFAULT_MAX_PAGE_SIZE, ListingQuery, ListingResult, run_listing, validate_query

from .errors import InvalidParametersError, NotFoundError
from .metadata import DEFAULT_PUBLIC_MOUNT, ROOT_FOLDER_LABEL, FileRecord, extract_file_record
from .storage import FileStorageManager


logger = logging.getLogger(__name__)


class ScopeKind(str, Enum):
    ROOT = "root"
    FOLDER = "folder"
    ALL = "all"


@dataclass(frozen=True)
class ListingScope:
    """Enumeration target: the root, one folder, or root plus every folder."""
    kind: ScopeKind
    folder: Optional[str] = None

    @classmethod
    def root(cls) -> "ListingScope":
        return cls(ScopeKind.ROOT)

    @classmethod
    def for_folder(cls, folder: str) -> "ListingScope":
        return cls(ScopeKind.FOLDER, folder)

    @classmethod
    def all(cls) -> "ListingScope":
        return cls(ScopeKind.ALL)


def _iter_files(directory: Path) -> Iterator[Path]:
    # Sorted by name so that unsorted listings are still stable.
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except FileNotFoundError:
        return
    for entry in entries:
        # Symlinks may point outside the storage root.
        if entry.is_file() and not entry.is_symlink():
            yield entry


def _collect(
    directory: Path,
    folder: Optional[str],
    *,
    folder_label: Optional[str],
    base_url: str,
    public_mount: str,
) -> list[FileRecord]:
    records: list[FileRecord] = []
    for path in _iter_files(directory):
        try:
            records.append(
                extract_file_record(
                    path,
                    folder,
                    folder_label=folder_label,
                    base_url=base_url,
                    public_mount=public_mount,
                )
            )
        except NotFoundError:
            logger.debug("Skipping %s: removed during listing", path)
    return records


def collect_records(
    storage: FileStorageManager,
    scope: ListingScope,
    *,
    base_url: str = "",
    public_mount: str = DEFAULT_PUBLIC_MOUNT,
) -> list[FileRecord]:
    """
    Enumerate the FileRecords of a scope, unfiltered.

    Raises:
        InvalidPathError: If the scope's folder name is invalid.
        NotFoundError: If the scope's folder does not exist.
    """
    root = storage.storage_root

    if scope.kind == ScopeKind.FOLDER:
        directory = storage.folder_path(scope.folder)
        return _collect(
            directory,
            scope.folder,
            folder_label=None,
            base_url=base_url,
            public_mount=public_mount,
        )

    if scope.kind == ScopeKind.ROOT:
        return _collect(
            root,
            None,
            folder_label=ROOT_FOLDER_LABEL,
            base_url=base_url,
            public_mount=public_mount,
        )

    records = _collect(root, None, folder_label=None, base_url=base_url, public_mount=public_mount)
    for folder in storage.list_folders():
        records.extend(
            _collect(root / folder, folder, folder_label=None, base_url=base_url, public_mount=public_mount)
        )
    return records


def list_files(
    storage: FileStorageManager,
    scope: ListingScope,
    query: ListingQuery,
    *,
    base_url: str = "",
    public_mount: str = DEFAULT_PUBLIC_MOUNT,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> ListingResult:
    """
    List the files of a scope with filters, sort and pagination applied.

    Args:
        storage: The storage manager.
        scope: Root, one folder, or all folders.
        query: Filter / sort / pagination inputs.
        base_url: Scheme and host used for record urls.
        public_mount: Mount prefix for record urls.
        max_page_size: Largest accepted page size.

    Returns:
        ListingResult whose items are FileRecords.

    Raises:
        InvalidParametersError: On bad pagination inputs (checked first).
        InvalidPathError: If the scope's folder name is invalid.
        NotFoundError: If the scope's folder does not exist.
    """
    try:
        validate_query(query, max_page_size=max_page_size)
    except ValueError as exc:
        raise InvalidParametersError(str(exc)) from exc

    records = collect_records(storage, scope, base_url=base_url, public_mount=public_mount)
    return run_listing(records, query, max_page_size=max_page_size)


def list_all_files(
    storage: FileStorageManager,
    *,
    base_url: str = "",
    public_mount: str = DEFAULT_PUBLIC_MOUNT,
) -> list[FileRecord]:
    """Every file in the root and in each folder, root files labelled with no folder."""
    return collect_records(storage, ListingScope.all(), base_url=base_url, public_mount=public_mount)
