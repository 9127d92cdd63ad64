"""
Archive utilities for downloading a folder as a zip file.

Each call writes a fresh, uniquely named zip into a scratch directory
outside the storage root. The caller owns the resulting file and must call
ArchiveHandle.cleanup() once it has been delivered.
"""

from __future__ import annotations

import logging
import tempfile
import uuid
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .storage import FileStorageManager


logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "Archivos"


@dataclass
class ArchiveHandle:
    """A temporary zip snapshot of one folder."""
    path: Path
    download_name: str
    files_archived: int
    bytes_archived: int

    def cleanup(self) -> None:
        """Delete the scratch zip. Safe to call more than once."""
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> "ArchiveHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


def generate_download_name(folder: str) -> str:
    """
    Suggested client-side file name.

    Format: Archivos_{folder}.zip
    """
    return f"{ARCHIVE_PREFIX}_{folder}.zip"


def generate_scratch_name(folder: str) -> str:
    """
    Unique scratch file name, so concurrent builds never share a file.

    Format: Archivos_{folder}_{uuid}.zip
    """
    return f"{ARCHIVE_PREFIX}_{folder}_{uuid.uuid4().hex}.zip"


def build_folder_archive(
    storage: FileStorageManager,
    folder: str,
    *,
    scratch_dir: Optional[Path] = None,
) -> ArchiveHandle:
    """
    Zip every file directly under a folder.

    Args:
        storage: The storage manager.
        folder: Name of the folder to archive.
        scratch_dir: Where to write the zip; defaults to the system temp dir.

    Returns:
        ArchiveHandle for the new zip.

    Raises:
        InvalidPathError: If the folder name is invalid.
        NotFoundError: If the folder does not exist.
        ValueError: If scratch_dir lies inside the storage root.
        OSError: If archive creation fails.
    """
    source_dir = storage.folder_path(folder)

    target_dir = Path(scratch_dir) if scratch_dir is not None else Path(tempfile.gettempdir())
    resolved_target = target_dir.resolve()
    root = storage.storage_root
    if resolved_target == root or root in resolved_target.parents:
        raise ValueError(f"Scratch directory must be outside the storage root: {target_dir}")
    target_dir.mkdir(parents=True, exist_ok=True)

    zip_path = target_dir / generate_scratch_name(folder)
    files_archived = 0
    bytes_archived = 0

    try:
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for file_path in sorted(source_dir.iterdir(), key=lambda p: p.name):
                if not file_path.is_file() or file_path.is_symlink():
                    continue
                zf.write(file_path, file_path.name)
                files_archived += 1
                bytes_archived += file_path.stat().st_size
    except BaseException:
        zip_path.unlink(missing_ok=True)
        raise

    logger.info(
        "Built archive of %s: %d files, %d bytes -> %s",
        folder,
        files_archived,
        bytes_archived,
        zip_path,
    )
    return ArchiveHandle(
        path=zip_path,
        download_name=generate_download_name(folder),
        files_archived=files_archived,
        bytes_archived=bytes_archived,
    )
