"""Untranslated corpus entry model."""

from __future__ import annotations

import builtins

from sqlalchemy import Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from manchuapp.db import Base
from manchuapp.exc import AlreadyExists


class UntranslatedEntry(Base):
    """Represents a manuscript image that has not been transcribed yet."""

    __tablename__ = "manchu_entries_untranslated"

    #: The entry ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The manuscript image URL.
    image_url: Mapped[str] = mapped_column(String, nullable=False)
    #: A free-text description of the image.
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    #: Link to the page the image was taken from.
    source_link: Mapped[str | None] = mapped_column(String, nullable=True)

    @classmethod
    def from_json(
        cls, session: Session, data: dict, replace: bool = False  # noqa: FBT001, FBT002
    ) -> UntranslatedEntry:
        """
        Create an untranslated entry from JSON import data.

        Raises:
            AlreadyExists: If an entry with the same ID exists and ``replace``
                is False

        """
        entry_id = data.get("id")
        if entry_id is not None:
            existing = session.get(cls, entry_id)
            if existing is not None:
                if not replace:
                    raise AlreadyExists("Untranslated entry", entry_id)
                session.delete(existing)
                session.flush()
        entry = cls(
            id=entry_id,
            image_url=data["image_url"],
            description=data.get("description"),
            source_link=data.get("source_link"),
        )
        session.add(entry)
        session.flush()
        return entry

    @classmethod
    def list(cls, session: Session) -> builtins.list[UntranslatedEntry]:
        """
        Get all untranslated entries, ordered by ID.
        """
        return builtins.list(session.scalars(select(cls).order_by(cls.id)).all())
