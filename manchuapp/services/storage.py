"""Corpus store: queries and imports against the corpus database."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from manchuapp.exc import DoesNotExist, StorageFailed
from manchuapp.models.entry import Entry
from manchuapp.models.untranslated import UntranslatedEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session, sessionmaker

    from manchuapp.models.record import Record

logger = logging.getLogger(__name__)


class CorpusStore:
    """
    Read access to the corpus.

    Every call opens its own session, so the store can be used from a worker
    thread while the UI thread keeps its own.

    Args:
        session_factory: SQLAlchemy session factory

    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def search(self, query: str) -> list[Record]:
        """
        Find records whose Manchu, Latin or English text contains ``query``,
        ignoring case.

        Args:
            query: Text to look for; an empty query matches everything

        Raises:
            StorageFailed: If the query fails

        Returns:
            Matching records ordered by ID

        """
        try:
            with self.session_factory() as session:
                return [entry.to_record() for entry in Entry.search(session, query)]
        except SQLAlchemyError as e:
            logger.exception(f"Search for {query!r} failed")
            raise StorageFailed("search", e) from e

    def list_translated(self) -> list[Entry]:
        """
        Get all translated entries, ordered by ID.

        Raises:
            StorageFailed: If the query fails

        """
        try:
            with self.session_factory() as session:
                return Entry.list(session)
        except SQLAlchemyError as e:
            logger.exception("Listing translated entries failed")
            raise StorageFailed("listing", e) from e

    def list_untranslated(self) -> list[UntranslatedEntry]:
        """
        Get all untranslated entries, ordered by ID.

        Raises:
            StorageFailed: If the query fails

        """
        try:
            with self.session_factory() as session:
                return UntranslatedEntry.list(session)
        except SQLAlchemyError as e:
            logger.exception("Listing untranslated entries failed")
            raise StorageFailed("listing", e) from e

    def get(self, entry_id: int) -> Entry:
        """
        Get a translated entry by ID.

        Raises:
            DoesNotExist: If there is no such entry
            StorageFailed: If the query fails

        """
        try:
            with self.session_factory() as session:
                entry = Entry.get(session, entry_id)
        except SQLAlchemyError as e:
            logger.exception(f"Loading entry {entry_id} failed")
            raise StorageFailed("lookup", e) from e
        if entry is None:
            raise DoesNotExist("Entry", entry_id)
        return entry


def group_by_source(entries: Iterable[Entry]) -> dict[str, list[Entry]]:
    """
    Group translated entries that share a source link.

    Only sources shared by more than one entry are kept; blank sources are
    ignored.  Groups keep the order in which their sources first appear.

    Args:
        entries: Translated entries

    Returns:
        Mapping of source link to the entries cut from it

    """
    groups: dict[str, list[Entry]] = defaultdict(list)
    for entry in entries:
        if entry.source and entry.source.strip():
            groups[entry.source.strip()].append(entry)
    return {source: group for source, group in groups.items() if len(group) > 1}


class CorpusImporter:
    """
    Loads corpus entries from a JSON file into the database.

    The file looks like::

        {
            "translated": [{"id": 1, "manchu_text": ..., "latin_text": ...}],
            "untranslated": [{"id": 1, "image_url": ...}]
        }

    Args:
        session: SQLAlchemy session

    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def load(self, filename: str | Path) -> dict[str, Any]:
        """
        Load and parse the import file.

        Raises:
            ValueError: If the file is missing or is not valid JSON

        """
        path = Path(filename)
        if not path.exists():
            msg = f"File {filename} not found"
            raise ValueError(msg)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Failed to load corpus data from file:\n{e!s}"
            raise ValueError(msg) from e
        if not isinstance(data, dict):
            msg = "Corpus file must contain a JSON object"
            raise ValueError(msg)  # noqa: TRY004
        return data

    def import_json(
        self, filename: str | Path, replace: bool = False  # noqa: FBT001, FBT002
    ) -> tuple[int, int]:
        """
        Import translated and untranslated entries from a JSON file.

        Nothing is written unless every entry imports cleanly.

        Args:
            filename: File to import

        Keyword Args:
            replace: If True, entries whose ID already exists are overwritten

        Raises:
            ValueError: If the file cannot be read or an entry is incomplete
                or invalid
            AlreadyExists: If an entry ID already exists and ``replace`` is False

        Returns:
            Tuple of (translated count, untranslated count)

        """
        data = self.load(filename)
        translated = data.get("translated") or []
        untranslated = data.get("untranslated") or []
        for key, entries in (
            ("translated", translated),
            ("untranslated", untranslated),
        ):
            if not isinstance(entries, list):
                msg = f"Corpus field {key!r} must be a list of entries"
                raise ValueError(msg)  # noqa: TRY004
        try:
            for entry_data in translated:
                Entry.from_json(self.session, entry_data, replace=replace)
            for entry_data in untranslated:
                UntranslatedEntry.from_json(self.session, entry_data, replace=replace)
        except KeyError as e:
            self.session.rollback()
            msg = f"Corpus entry is missing field {e!s}"
            raise ValueError(msg) from e
        except (AttributeError, TypeError, SQLAlchemyError) as e:
            self.session.rollback()
            msg = f"Corpus entry is invalid:\n{e!s}"
            raise ValueError(msg) from e
        except Exception:
            self.session.rollback()
            raise
        self.session.commit()
        logger.info(
            f"Imported {len(translated)} translated and "
            f"{len(untranslated)} untranslated entries from {filename}"
        )
        return len(translated), len(untranslated)
