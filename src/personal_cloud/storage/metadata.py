"""
File metadata extraction.

A FileRecord is never persisted; it is derived from the filesystem entry on
every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from .errors import NotFoundError


DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_PUBLIC_MOUNT = "/Archivos"

# Label used for files that sit directly under the storage root.
ROOT_FOLDER_LABEL = "(raíz)"

EXTENSION_MIME_TYPES = {
    # text
    "txt": "text/plain",
    "csv": "text/csv",
    "htm": "text/html",
    "html": "text/html",
    "css": "text/css",
    "md": "text/markdown",
    "xml": "application/xml",
    "json": "application/json",
    "js": "text/javascript",
    # documents
    "pdf": "application/pdf",
    "rtf": "application/rtf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "epub": "application/epub+zip",
    # images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "heic": "image/heic",
    # audio / video
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "mkv": "video/x-matroska",
    # archives
    "zip": "application/zip",
    "gz": "application/gzip",
    "tar": "application/x-tar",
    "7z": "application/x-7z-compressed",
    "rar": "application/vnd.rar",
}


@dataclass(frozen=True)
class FileRecord:
    """Metadata view of one stored file."""
    name: str
    size: int
    created_at: datetime
    mime_type: str
    folder: Optional[str]   # label: folder name, ROOT_FOLDER_LABEL, or None
    url: str

    @property
    def extension(self) -> str:
        return normalize_extension(Path(self.name).suffix)


def normalize_extension(extension: Optional[str]) -> str:
    """Lowercase an extension and strip any leading dots (".PDF" -> "pdf")."""
    if not extension:
        return ""
    return extension.strip().lstrip(".").lower()


def guess_mime_type(file_name: str) -> str:
    """
    Infer the MIME type of a file from its extension.

    Args:
        file_name: File name (a path is accepted too).

    Returns:
        MIME type string, or application/octet-stream when unknown.
    """
    ext = normalize_extension(Path(file_name).suffix)
    return EXTENSION_MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def build_public_url(
    file_name: str,
    folder: Optional[str] = None,
    *,
    base_url: str = "",
    public_mount: str = DEFAULT_PUBLIC_MOUNT,
) -> str:
    """
    Build the public address of a stored file.

    Format: <base_url><public_mount>/[<folder>/]<file_name>
    """
    parts = [quote(folder, safe="")] if folder else []
    parts.append(quote(file_name, safe=""))
    mount = "/" + public_mount.strip("/") if public_mount.strip("/") else ""
    return f"{base_url.rstrip('/')}{mount}/{'/'.join(parts)}"


def _creation_time(stat_result) -> datetime:
    # st_birthtime is only available on some platforms (macOS, BSD, newer Windows).
    ts = getattr(stat_result, "st_birthtime", None)
    if ts is None:
        ts = stat_result.st_mtime
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def extract_file_record(
    path: Path,
    folder: Optional[str],
    *,
    folder_label: Optional[str] = None,
    base_url: str = "",
    public_mount: str = DEFAULT_PUBLIC_MOUNT,
) -> FileRecord:
    """
    Convert a filesystem entry into a FileRecord.

    Args:
        path: Absolute path to the file.
        folder: Name of the containing folder, or None for root files.
        folder_label: Label to report for root files (ignored when folder is set).
        base_url: Scheme and host to prefix the url with.
        public_mount: Mount prefix under which stored files are served.

    Returns:
        The FileRecord.

    Raises:
        NotFoundError: If the file no longer exists.
    """
    try:
        st = path.stat()
    except FileNotFoundError as exc:
        raise NotFoundError(f"File not found: {path.name}") from exc

    return FileRecord(
        name=path.name,
        size=st.st_size,
        created_at=_creation_time(st),
        mime_type=guess_mime_type(path.name),
        folder=folder if folder else folder_label,
        url=build_public_url(path.name, folder, base_url=base_url, public_mount=public_mount),
    )
