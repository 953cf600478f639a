from .entry import EntryDialog
from .settings import SettingsDialog

__all__ = [
    "EntryDialog",
    "SettingsDialog",
]
