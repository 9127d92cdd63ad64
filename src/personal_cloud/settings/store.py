from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import GlobalSettings


logger = logging.getLogger(__name__)


class SettingsStore:
    """
    Read-only view of the JSON config file.

    The service never writes its own configuration; operators edit the
    file and restart. A missing or unreadable file yields the defaults.
    """

    def __init__(self, *, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> GlobalSettings:
        if not self._path.exists():
            logger.info("No settings file at %s, using defaults", self._path)
            return GlobalSettings()

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return GlobalSettings()

        if not isinstance(raw, dict):
            logger.warning("Ignoring settings file %s: top level is not an object", self._path)
            return GlobalSettings()

        return GlobalSettings.from_config_dict(raw)
