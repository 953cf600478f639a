"""Whitespace tokenizer for parallel-script text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

#: Pattern used to split text into word tokens.
WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


@dataclass(frozen=True, order=True)
class TokenId:
    """
    Composite key of a word token: the record it belongs to and its position
    in that record.

    The same ID addresses the Manchu token and the Latin token at that
    position, which is what ties the two scripts together.
    """

    #: The record ID.
    record_id: int
    #: The 0-based position of the token after whitespace splitting.
    position_index: int

    def __str__(self) -> str:
        return f"{self.record_id}-{self.position_index}"

    @classmethod
    def parse(cls, value: str) -> TokenId:
        """
        Parse the ``"<recordId>-<positionIndex>"`` string form of a token ID.

        Args:
            value: String form of the token ID

        Raises:
            ValueError: If ``value`` is not a valid token ID

        Returns:
            The token ID

        """
        record_id, sep, position_index = value.rpartition("-")
        if not sep or not record_id or not position_index.isdigit():
            msg = f"Invalid token ID: {value!r}"
            raise ValueError(msg)
        try:
            return cls(int(record_id), int(position_index))
        except ValueError as e:
            msg = f"Invalid token ID: {value!r}"
            raise ValueError(msg) from e


@dataclass(frozen=True)
class Token:
    """A word token of one script of a record."""

    #: The record ID.
    record_id: int
    #: The 0-based position of the token in the record's text.
    position_index: int
    #: The word itself.
    text: str

    @property
    def token_id(self) -> TokenId:
        """The :class:`TokenId` of this token."""
        return TokenId(self.record_id, self.position_index)


def split_words(text: str) -> list[str]:
    """
    Split text on runs of whitespace.

    Leading and trailing whitespace do not produce empty words, and blank
    text produces no words at all.

    Args:
        text: Text to split

    Returns:
        List of words

    """
    return [word for word in WHITESPACE.split(text) if word]


def tokenize(text: str, record_id: int) -> list[Token]:
    """
    Tokenize one script of a record.

    Args:
        text: Manchu or Latin text of the record
        record_id: ID of the record the text belongs to

    Returns:
        Tokens in order of appearance

    """
    return [
        Token(record_id=record_id, position_index=index, text=word)
        for index, word in enumerate(split_words(text))
    ]
