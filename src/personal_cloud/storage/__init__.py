"""
File-storage management engine.

Provides:
- Name validation against the storage root (paths.py)
- File metadata extraction (metadata.py)
- Filterable / sortable / paginated listings (listing.py)
- Folder zip archives (archive_zip.py)
- Folder and file mutations (storage.py)
"""

from .archive_zip import ArchiveHandle, build_folder_archive
from .errors import (
    ConflictError,
    InvalidParametersError,
    InvalidPathError,
    InvalidUploadError,
    NotFoundError,
    StorageError,
)
from .listing import ListingScope, ScopeKind, collect_records, list_all_files, list_files
from .metadata import ROOT_FOLDER_LABEL, FileRecord, extract_file_record, guess_mime_type
from .paths import PathResolver, validate_name
from .storage import FileStorageManager, StoredFile

__all__ = [
    "ArchiveHandle",
    "ConflictError",
    "FileRecord",
    "FileStorageManager",
    "InvalidParametersError",
    "InvalidPathError",
    "InvalidUploadError",
    "ListingScope",
    "NotFoundError",
    "PathResolver",
    "ROOT_FOLDER_LABEL",
    "ScopeKind",
    "StorageError",
    "StoredFile",
    "build_folder_archive",
    "collect_records",
    "extract_file_record",
    "guess_mime_type",
    "list_all_files",
    "list_files",
    "validate_name",
]
