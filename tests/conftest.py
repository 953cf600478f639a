"""Shared pytest fixtures and test helpers for Manchu Reader tests."""

import os
import tempfile
from pathlib import Path

# Widgets are built without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import manchuapp.models  # noqa: F401
from manchuapp.db import Base
from manchuapp.models.entry import Entry
from manchuapp.models.record import Record
from manchuapp.models.untranslated import UntranslatedEntry
from manchuapp.services.storage import CorpusStore


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for testing PySide6 widgets."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def session_factory():
    """Create a temporary database and return a session factory bound to it."""
    temp_db = tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".db")
    temp_db.close()
    db_path = Path(temp_db.name)

    engine = create_engine(
        f"sqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    yield factory

    engine.dispose()
    os.unlink(temp_db.name)


@pytest.fixture
def db_session(session_factory):
    """Create a session on the temporary database."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(session_factory):
    """Create a corpus store on the temporary database."""
    return CorpusStore(session_factory)


@pytest.fixture
def sample_records():
    """Two records with unequal Manchu and Latin word counts."""
    return [
        make_record(1, "ᠠᠮᠪᠠ ᠪᠠᡳᡨᠠ", "amba baita", "a great matter"),
        make_record(2, "ᡝᠨᡩᡠᡵᡳ ᡳ ᡤᡳᠰᡠᠨ", "enduri i gisun ere", "the word of the spirit"),
    ]


# Test helper functions (not fixtures, but available for import)


def make_record(record_id, manchu_text, latin_text, english_text=None):
    """
    Helper to build a :class:`Record`.

    Args:
        record_id: Record ID
        manchu_text: Manchu text
        latin_text: Latin text
        english_text: Optional English text

    Returns:
        The record
    """
    return Record(
        id=record_id,
        manchu_text=manchu_text,
        latin_text=latin_text,
        english_text=english_text,
    )


def create_test_entry(
    session,
    entry_id=None,
    manchu_text="ᠠᠮᠪᠠ",
    latin_text="amba",
    english_text="great",
    source=None,
):
    """
    Helper to create a translated entry with defaults.

    Args:
        session: SQLAlchemy session
        entry_id: Entry ID (if None, the database assigns one)
        manchu_text: Manchu text
        latin_text: Latin text
        english_text: English text
        source: Optional source link

    Returns:
        Created Entry instance
    """
    entry = Entry(
        id=entry_id,
        manchu_text=manchu_text,
        latin_text=latin_text,
        english_text=english_text,
        source=source,
    )
    session.add(entry)
    session.commit()
    return entry


def create_test_untranslated(
    session, entry_id=None, image_url="https://example.org/page.jpg", description=None
):
    """
    Helper to create an untranslated entry with defaults.

    Returns:
        Created UntranslatedEntry instance
    """
    entry = UntranslatedEntry(id=entry_id, image_url=image_url, description=description)
    session.add(entry)
    session.commit()
    return entry
