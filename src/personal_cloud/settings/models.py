from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from src.shared.listing import DEFAULT_MAX_PAGE_SIZE

from ..storage.metadata import DEFAULT_PUBLIC_MOUNT


DEFAULT_STORAGE_ROOT = "wwwroot/Archivos"
DEFAULT_JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class AuthSettings:
    secret_key: str = ""
    issuer: Optional[str] = None
    audience: Optional[str] = None
    algorithm: str = DEFAULT_JWT_ALGORITHM

    def is_configured(self) -> bool:
        return bool(self.secret_key.strip())

    @classmethod
    def from_config_dict(cls, data: dict[str, Any]) -> "AuthSettings":
        return cls(
            secret_key=str(data.get("secret_key", "") or ""),
            issuer=(str(data.get("issuer")) if data.get("issuer") else None),
            audience=(str(data.get("audience")) if data.get("audience") else None),
            algorithm=str(data.get("algorithm", DEFAULT_JWT_ALGORITHM) or DEFAULT_JWT_ALGORITHM),
        )


@dataclass
class GlobalSettings:
    storage_root: str = DEFAULT_STORAGE_ROOT
    public_mount: str = DEFAULT_PUBLIC_MOUNT
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    scratch_dir: Optional[str] = None
    auth: AuthSettings = field(default_factory=AuthSettings)

    @classmethod
    def from_config_dict(cls, data: dict[str, Any]) -> "GlobalSettings":
        storage_root = str(data.get("storage_root", DEFAULT_STORAGE_ROOT) or DEFAULT_STORAGE_ROOT)

        public_mount = str(data.get("public_mount", DEFAULT_PUBLIC_MOUNT) or DEFAULT_PUBLIC_MOUNT)
        if not public_mount.startswith("/"):
            public_mount = "/" + public_mount

        try:
            max_page_size = int(data.get("max_page_size", DEFAULT_MAX_PAGE_SIZE) or DEFAULT_MAX_PAGE_SIZE)
        except (TypeError, ValueError):
            max_page_size = DEFAULT_MAX_PAGE_SIZE
        if max_page_size < 1:
            max_page_size = DEFAULT_MAX_PAGE_SIZE

        scratch_dir = data.get("scratch_dir")
        scratch_dir = str(scratch_dir) if scratch_dir else None

        raw_auth = data.get("auth")
        auth = AuthSettings()
        if isinstance(raw_auth, dict):
            auth = AuthSettings.from_config_dict(raw_auth)

        return cls(
            storage_root=storage_root,
            public_mount=public_mount,
            max_page_size=max_page_size,
            scratch_dir=scratch_dir,
            auth=auth,
        )
