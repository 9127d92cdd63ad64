from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .auth import create_bearer_dependency
from .files import create_files_router
from .settings.models import GlobalSettings
from .settings.store import SettingsStore
from .storage import FileStorageManager


logger = logging.getLogger(__name__)


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def resolve_storage_root(settings: GlobalSettings, *, repo_root: Path) -> Path:
    root = Path(settings.storage_root).expanduser()
    if not root.is_absolute():
        root = repo_root / root
    return root.resolve()


def create_app(
    settings: Optional[GlobalSettings] = None,
    *,
    repo_root: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> FastAPI:
    repo_root = repo_root or _repo_root()
    config_path = config_path or (repo_root / "data" / "config.json")

    store = SettingsStore(path=config_path)
    if settings is None:
        settings = store.load()

    storage = FileStorageManager(storage_root=resolve_storage_root(settings, repo_root=repo_root))
    storage.ensure_root()
    if not settings.auth.is_configured():
        logger.warning("No secret key configured in %s; every file request will be rejected", config_path)

    require_caller = create_bearer_dependency(settings.auth)

    app = FastAPI(
        title="Nube Personal API",
        version="1.0.0",
        description="Upload, list and download files stored on this machine from any device.",
        docs_url="/docs",
    )
    app.include_router(create_files_router(storage=storage, settings=settings, require_caller=require_caller))

    app.state.settings_store = store
    app.state.settings = settings
    app.state.storage = storage
    app.state.repo_root = repo_root

    # Stored files are served as-is, without authentication.
    app.mount(
        settings.public_mount,
        StaticFiles(directory=str(storage.storage_root)),
        name="stored-files",
    )
    return app
