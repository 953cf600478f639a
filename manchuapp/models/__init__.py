"""Data models for Manchu Reader."""

from manchuapp.models.entry import Entry
from manchuapp.models.record import Record
from manchuapp.models.untranslated import UntranslatedEntry

__all__ = ["Entry", "Record", "UntranslatedEntry"]
