"""
Storage root directory structure management.

Directory structure:
    <storage_root>/<file>              root-level files
    <storage_root>/<folder>/<file>     one level of folders, files only
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, NamedTuple, Optional

from .errors import ConflictError, InvalidUploadError, NotFoundError
from .paths import PathResolver


logger = logging.getLogger(__name__)

# Buffer size for copying upload streams
COPY_BUFFER_SIZE = 1024 * 1024  # 1 MB


class StoredFile(NamedTuple):
    """Result of storing an uploaded file."""
    name: str
    folder: Optional[str]   # None for root
    size: int


class FileStorageManager:
    """
    Owns the storage root and every mutation under it.

    All user-supplied names go through the PathResolver before the
    filesystem is touched.
    """

    def __init__(self, storage_root: Path):
        """
        Initialize the storage manager.

        Args:
            storage_root: The root directory for all stored files.
        """
        self._resolver = PathResolver(Path(storage_root))

    @property
    def storage_root(self) -> Path:
        """Get the storage root directory."""
        return self._resolver.root

    def ensure_root(self) -> Path:
        """
        Ensure the storage root exists, creating it if needed.

        Raises:
            OSError: If the directory cannot be created.
        """
        self.storage_root.mkdir(parents=True, exist_ok=True)
        return self.storage_root

    def folder_path(self, folder: str) -> Path:
        """
        Resolve an existing folder.

        Raises:
            InvalidPathError: If the name is invalid.
            NotFoundError: If the folder does not exist.
        """
        path = self._resolver.resolve_folder(folder)
        if not path.is_dir():
            raise NotFoundError(f"Folder not found: {folder}")
        return path

    def list_folders(self) -> list[str]:
        """
        List the names of all folders directly under the root.

        Returns:
            Sorted folder names; empty if the root is missing.
        """
        if not self.storage_root.is_dir():
            return []
        # Symlinked directories may point outside the root and are never listed.
        return sorted(
            p.name for p in self.storage_root.iterdir() if p.is_dir() and not p.is_symlink()
        )

    def create_folder(self, name: str) -> Path:
        """
        Create an empty folder.

        Raises:
            InvalidPathError: If the name is invalid.
            ConflictError: If the folder already exists.
        """
        path = self._resolver.resolve_folder(name)
        if path.is_dir():
            raise ConflictError(f"Folder already exists: {name}")

        try:
            path.mkdir(parents=False, exist_ok=False)
        except FileExistsError as exc:
            raise ConflictError(f"Folder already exists: {name}") from exc

        logger.info("Created folder %s", name)
        return path

    def store(self, folder: Optional[str], file_name: str, stream: BinaryIO) -> StoredFile:
        """
        Write an uploaded stream to <folder>/<file_name> (or <root>/<file_name>).

        The target folder is created when it does not exist yet. An existing
        file of the same name is overwritten.

        Args:
            folder: Target folder name, or None for the root.
            file_name: Name of the file to write.
            stream: Binary stream with the file contents.

        Returns:
            StoredFile with the written size.

        Raises:
            InvalidPathError: If the folder or file name is invalid.
            InvalidUploadError: If no stream was given.
            ConflictError: If a folder already has the target file name, or a
                file already has the target folder name.
        """
        if stream is None:
            raise InvalidUploadError("No file content")

        target = self._resolver.resolve_file(file_name, folder)
        if target.is_dir():
            raise ConflictError(f"A folder named {file_name!r} already exists")
        if target.parent.exists() and not target.parent.is_dir():
            raise ConflictError(f"A file named {folder!r} already exists")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except FileExistsError as exc:
            raise ConflictError(f"A file named {folder!r} already exists") from exc

        with open(target, "wb") as out:
            shutil.copyfileobj(stream, out, COPY_BUFFER_SIZE)
        size = target.stat().st_size

        logger.info("Stored %s in %s (%d bytes)", file_name, folder or "root", size)
        return StoredFile(name=file_name, folder=folder, size=size)

    def delete_file(self, file_name: str, folder: Optional[str] = None) -> None:
        """
        Delete exactly one file.

        Raises:
            InvalidPathError: If a name is invalid.
            NotFoundError: If the file does not exist.
        """
        path = self._resolver.resolve_file(file_name, folder)
        if not path.is_file():
            raise NotFoundError(f"File not found: {file_name}")

        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(f"File not found: {file_name}") from exc

        logger.info("Deleted file %s from %s", file_name, folder or "root")

    def delete_folder(self, name: str) -> None:
        """
        Delete a folder and everything beneath it.

        Raises:
            InvalidPathError: If the name is invalid.
            NotFoundError: If the folder does not exist.
        """
        path = self.folder_path(name)

        try:
            shutil.rmtree(path)
        except FileNotFoundError as exc:
            raise NotFoundError(f"Folder not found: {name}") from exc

        logger.info("Deleted folder %s", name)
