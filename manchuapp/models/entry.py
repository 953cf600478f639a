"""Translated corpus entry model."""

from __future__ import annotations

import builtins

from sqlalchemy import Integer, String, or_, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from manchuapp.db import Base
from manchuapp.exc import AlreadyExists
from manchuapp.models.record import Record


class Entry(Base):
    """
    Represents a translated corpus entry.

    An entry has these characteristics:
    - A Manchu text
    - A Latin transliteration of the Manchu text
    - An optional English translation
    - An optional manuscript image URL
    - An optional source link, shared by entries cut from the same page
    """

    __tablename__ = "manchu_entries"

    #: The entry ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The manuscript image URL.
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The Manchu script text.
    manchu_text: Mapped[str] = mapped_column(String, nullable=False)
    #: The Latin transliteration.
    latin_text: Mapped[str] = mapped_column(String, nullable=False)
    #: The English translation.
    english_text: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The source link.
    source: Mapped[str | None] = mapped_column(String, nullable=True)

    def to_record(self) -> Record:
        """
        Convert this entry into an immutable :class:`Record`.

        Returns:
            The record

        """
        return Record(
            id=self.id,
            manchu_text=self.manchu_text,
            latin_text=self.latin_text,
            english_text=self.english_text,
        )

    @classmethod
    def from_json(
        cls, session: Session, data: dict, replace: bool = False  # noqa: FBT001, FBT002
    ) -> Entry:
        """
        Create an entry from JSON import data.

        Args:
            session: SQLAlchemy session
            data: Entry data dictionary

        Keyword Args:
            replace: If True, overwrite an existing entry with the same ID

        Raises:
            AlreadyExists: If an entry with the same ID exists and ``replace``
                is False

        Returns:
            The created or updated entry

        """
        entry_id = data.get("id")
        if entry_id is not None:
            existing = cls.get(session, entry_id)
            if existing is not None:
                if not replace:
                    raise AlreadyExists("Entry", entry_id)
                session.delete(existing)
                session.flush()
        entry = cls(
            id=entry_id,
            image_url=data.get("image_url"),
            manchu_text=data["manchu_text"],
            latin_text=data["latin_text"],
            english_text=data.get("english_text"),
            source=data.get("source"),
        )
        session.add(entry)
        session.flush()
        return entry

    @classmethod
    def get(cls, session: Session, entry_id: int) -> Entry | None:
        """
        Get an entry by ID.
        """
        return session.get(cls, entry_id)

    @classmethod
    def list(cls, session: Session) -> builtins.list[Entry]:
        """
        Get all entries, ordered by ID.
        """
        return builtins.list(session.scalars(select(cls).order_by(cls.id)).all())

    @classmethod
    def search(cls, session: Session, query: str) -> builtins.list[Entry]:
        """
        Find entries whose Manchu, Latin or English text contains ``query``,
        ignoring case.

        Args:
            session: SQLAlchemy session
            query: Text to look for

        Returns:
            Matching entries ordered by ID

        """
        pattern = f"%{query}%"
        stmt = (
            select(cls)
            .where(
                or_(
                    cls.english_text.ilike(pattern),
                    cls.latin_text.ilike(pattern),
                    cls.manchu_text.ilike(pattern),
                )
            )
            .order_by(cls.id)
        )
        return builtins.list(session.scalars(stmt).all())
