"""
API routes for file storage operations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from src.shared.listing import ListingQuery

from ..settings.models import GlobalSettings
from ..storage import (
    ROOT_FOLDER_LABEL,
    ConflictError,
    FileStorageManager,
    InvalidParametersError,
    InvalidPathError,
    InvalidUploadError,
    ListingScope,
    NotFoundError,
    StorageError,
    build_folder_archive,
    list_all_files,
    list_files,
)
from .models import FileRecordOut, ListingOut, MessageOut, UploadOut


# Folder values that mean "the storage root" when deleting a file.
_ROOT_ALIASES = ("", ".", "null")

_STATUS_BY_ERROR = {
    InvalidPathError: 400,
    InvalidParametersError: 400,
    InvalidUploadError: 400,
    NotFoundError: 404,
    ConflictError: 409,
}


def _http_error(exc: StorageError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _optional_folder(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    folder = raw.strip()
    return folder or None


def create_files_router(
    *,
    storage: FileStorageManager,
    settings: GlobalSettings,
    require_caller=None,
) -> APIRouter:
    """
    Create the file storage API router.

    Args:
        storage: The storage manager.
        settings: Global settings (public mount, page size limit, scratch dir).
        require_caller: Authorization dependency applied to every route.

    Returns:
        FastAPI router with file endpoints.
    """
    dependencies = [Depends(require_caller)] if require_caller is not None else []
    router = APIRouter(prefix="/api/files", tags=["files"], dependencies=dependencies)
    scratch_dir = Path(settings.scratch_dir) if settings.scratch_dir else None

    def _list(request: Request, scope: ListingScope, **raw) -> ListingOut:
        try:
            query = ListingQuery.from_raw(**raw)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        try:
            result = list_files(
                storage,
                scope,
                query,
                base_url=str(request.base_url),
                public_mount=settings.public_mount,
                max_page_size=settings.max_page_size,
            )
        except StorageError as exc:
            raise _http_error(exc) from exc
        return ListingOut.from_result(result)

    @router.post("/upload", response_model=UploadOut)
    def upload(
        file: Optional[UploadFile] = File(None),
        folder: Optional[str] = Form(None),
    ) -> UploadOut:
        """
        Upload a file to the root or to a folder.

        The folder is created if it does not exist yet; an existing file
        with the same name is overwritten.
        """
        target_folder = _optional_folder(folder)
        try:
            if file is None or not file.filename:
                raise InvalidUploadError("Invalid file")
            if not file.file.read(1):
                raise InvalidUploadError("Invalid file: empty")
            file.file.seek(0)

            stored = storage.store(target_folder, file.filename, file.file)
        except StorageError as exc:
            raise _http_error(exc) from exc

        return UploadOut(
            message="File uploaded successfully",
            name=stored.name,
            folder=stored.folder or ROOT_FOLDER_LABEL,
            size=stored.size,
        )

    @router.post("/create-folder", response_model=MessageOut)
    def create_folder(name: Optional[str] = Query(None)) -> MessageOut:
        """Create an empty folder; 409 if it already exists."""
        try:
            storage.create_folder(name)
        except StorageError as exc:
            raise _http_error(exc) from exc
        return MessageOut(message="Folder created", folder=name)

    @router.get("/folders", response_model=list[str])
    def list_folders() -> list[str]:
        """Names of all folders."""
        return storage.list_folders()

    @router.get("/list-files", response_model=ListingOut)
    def list_files_endpoint(
        request: Request,
        folder: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        order: Optional[str] = Query(None),
        mime_type: Optional[str] = Query(None, alias="mimeType"),
        ext: Optional[str] = Query(None),
        page: Optional[str] = Query(None),
        page_size: Optional[str] = Query(None, alias="pageSize"),
    ) -> ListingOut:
        """
        List files of one folder, or of the root when no folder is given.

        Filters are conjunctive; pageSize=0 returns every match.
        """
        target_folder = _optional_folder(folder)
        scope = ListingScope.for_folder(target_folder) if target_folder else ListingScope.root()
        return _list(
            request,
            scope,
            mime_type=mime_type,
            extension=ext,
            sort_by=sort_by,
            order=order,
            page=page,
            page_size=page_size,
        )

    @router.get("/list-folder", response_model=ListingOut)
    def list_folder(
        request: Request,
        folder: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        order: Optional[str] = Query(None),
        mime_type: Optional[str] = Query(None, alias="mimeType"),
        ext: Optional[str] = Query(None),
        page: Optional[str] = Query(None),
        page_size: Optional[str] = Query(None, alias="pageSize"),
    ) -> ListingOut:
        """List files of a folder (the folder is required)."""
        return _list(
            request,
            ListingScope.for_folder(folder),
            mime_type=mime_type,
            extension=ext,
            sort_by=sort_by,
            order=order,
            page=page,
            page_size=page_size,
        )

    @router.get("/list-root", response_model=ListingOut)
    def list_root(
        request: Request,
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        order: Optional[str] = Query(None),
        mime_type: Optional[str] = Query(None, alias="mimeType"),
        ext: Optional[str] = Query(None),
        page: Optional[str] = Query(None),
        page_size: Optional[str] = Query(None, alias="pageSize"),
    ) -> ListingOut:
        """List files that sit directly in the root."""
        return _list(
            request,
            ListingScope.root(),
            mime_type=mime_type,
            extension=ext,
            sort_by=sort_by,
            order=order,
            page=page,
            page_size=page_size,
        )

    @router.get("/list-all", response_model=list[FileRecordOut])
    def list_all(request: Request) -> list[FileRecordOut]:
        """Every file, in the root and in all folders."""
        records = list_all_files(
            storage,
            base_url=str(request.base_url),
            public_mount=settings.public_mount,
        )
        return [FileRecordOut.from_record(r) for r in records]

    @router.get("/download-zip")
    def download_zip(folder: Optional[str] = Query(None)) -> FileResponse:
        """
        Download a folder as a zip.

        The scratch zip is deleted once the response has been sent.
        """
        try:
            handle = build_folder_archive(storage, folder, scratch_dir=scratch_dir)
        except StorageError as exc:
            raise _http_error(exc) from exc

        return FileResponse(
            handle.path,
            media_type="application/zip",
            filename=handle.download_name,
            background=BackgroundTask(handle.cleanup),
        )

    @router.delete("/delete-file", response_model=MessageOut)
    def delete_file(
        nombre: Optional[str] = Query(None),
        carpeta: Optional[str] = Query(None),
    ) -> MessageOut:
        """Delete one file from a folder, or from the root when no folder is given."""
        try:
            if nombre is None or not nombre.strip():
                raise InvalidParametersError("File name not specified")
            folder = (carpeta or "").strip()
            if folder in _ROOT_ALIASES:
                folder = None
            storage.delete_file(nombre, folder)
        except StorageError as exc:
            raise _http_error(exc) from exc
        return MessageOut(message="File deleted", folder=folder)

    @router.delete("/delete-folder", response_model=MessageOut)
    def delete_folder(folder: Optional[str] = Query(None)) -> MessageOut:
        """Delete a folder and everything in it."""
        try:
            storage.delete_folder(folder)
        except StorageError as exc:
            raise _http_error(exc) from exc
        return MessageOut(message="Folder deleted", folder=folder)

    return router
