from .models import AuthSettings, GlobalSettings
from .store import SettingsStore

__all__ = [
    "AuthSettings",
    "GlobalSettings",
    "SettingsStore",
]
