"""
HTTP surface of the file-storage engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import APIRouter  # pragma: no cover

    from ..settings.models import GlobalSettings
    from ..storage import FileStorageManager


def create_files_router(*, storage: "FileStorageManager", settings: "GlobalSettings", require_caller=None) -> "APIRouter":
    """
    Lazily import FastAPI router to keep non-web imports lightweight.
    """
    from .api import create_files_router as _create_files_router

    return _create_files_router(storage=storage, settings=settings, require_caller=require_caller)


__all__ = [
    "create_files_router",
]
