"""
Wire models for the file API.

Field aliases keep the JSON names used by existing clients.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.listing import ListingResult

from ..storage import FileRecord


class FileRecordOut(BaseModel):
    """One stored file."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="nombre")
    size: int = Field(alias="tamaño")
    created_at: datetime = Field(alias="fechaSubida")
    mime_type: str = Field(alias="tipoMime")
    folder: Optional[str] = Field(default=None, alias="carpeta")
    url: str

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileRecordOut":
        return cls(
            name=record.name,
            size=record.size,
            created_at=record.created_at,
            mime_type=record.mime_type,
            folder=record.folder,
            url=record.url,
        )


class ListingOut(BaseModel):
    """One page of files plus counts over all matches."""
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="paginaActual")
    total_pages: int = Field(alias="totalPaginas")
    total_count: int = Field(alias="totalArchivos")
    items: list[FileRecordOut] = Field(alias="archivos")

    @classmethod
    def from_result(cls, result: ListingResult) -> "ListingOut":
        return cls(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_count=result.total_count,
            items=[FileRecordOut.from_record(r) for r in result.items],
        )


class UploadOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(alias="mensaje")
    name: str = Field(alias="nombre")
    folder: str = Field(alias="carpeta")
    size: int = Field(alias="tamaño")


class MessageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(alias="mensaje")
    folder: Optional[str] = Field(default=None, alias="carpeta")
