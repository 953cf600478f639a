"""Record value type."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    """
    One corpus entry as held in a result set.

    Records are immutable once loaded; a new search replaces the whole result
    set rather than patching individual records.
    """

    #: The entry ID, assigned by the corpus store.
    id: int
    #: The text in Manchu script.
    manchu_text: str
    #: The Möllendorff Latin transliteration.
    latin_text: str
    #: The English translation, if any.
    english_text: str | None = None
