"""Positional alignment index over a result set."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from manchuapp.services.tokenizer import Token, TokenId, tokenize

if TYPE_CHECKING:
    from collections.abc import Iterable

    from manchuapp.models.record import Record


class Script(Enum):
    """The two token-bearing scripts of a record."""

    MANCHU = "manchu"
    LATIN = "latin"


class AlignmentIndex:
    """
    Token universe of a result set, grouped per record.

    Alignment is positional: token *i* of a record's Manchu text is taken to
    be the counterpart of token *i* of its Latin text, whether or not the two
    texts have the same number of words.  A position that exists in only one
    of the scripts is still part of the universe.

    The index is built once per result set and never patched; build a new
    one when the result set changes.

    Args:
        records: Records of the result set, in display order

    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        #: Tokens per record and script.
        self._tokens: dict[int, dict[Script, list[Token]]] = {}
        #: Sibling token IDs per record, in position order.
        self._siblings: dict[int, list[TokenId]] = {}
        #: Every token ID of the result set, record order then position order.
        self.token_universe: list[TokenId] = []

        for record in records:
            by_script = {
                Script.MANCHU: tokenize(record.manchu_text, record.id),
                Script.LATIN: tokenize(record.latin_text, record.id),
            }
            self._tokens[record.id] = by_script
            width = max(len(tokens) for tokens in by_script.values())
            siblings = [TokenId(record.id, i) for i in range(width)]
            self._siblings[record.id] = siblings
            self.token_universe.extend(siblings)

    def __len__(self) -> int:
        return len(self.token_universe)

    def __contains__(self, token_id: object) -> bool:
        if not isinstance(token_id, TokenId):
            return False
        siblings = self._siblings.get(token_id.record_id, [])
        return 0 <= token_id.position_index < len(siblings)

    def siblings(self, record_id: int) -> list[TokenId]:
        """
        Get the token IDs of a record, in position order.

        Args:
            record_id: Record ID

        Returns:
            List of token IDs, empty if the record is not in the result set

        """
        return list(self._siblings.get(record_id, []))

    @staticmethod
    def index_of(token_id: TokenId, siblings: list[TokenId]) -> int:
        """
        Get the position of ``token_id`` in ``siblings``.

        Returns:
            Index in the list, or -1 if the token ID is not in it

        """
        try:
            return siblings.index(token_id)
        except ValueError:
            return -1

    def tokens(self, record_id: int, script: Script) -> list[Token]:
        """
        Get the tokens of one script of a record.

        Args:
            record_id: Record ID
            script: Which script

        Returns:
            List of tokens, empty if the record is not in the result set

        """
        return list(self._tokens.get(record_id, {}).get(script, []))

    def counterpart(self, token_id: TokenId, script: Script) -> Token | None:
        """
        Get the token aligned with ``token_id`` in ``script``.

        Returns:
            The token, or None if that script has no word at this position

        """
        tokens = self._tokens.get(token_id.record_id, {}).get(script, [])
        if 0 <= token_id.position_index < len(tokens):
            return tokens[token_id.position_index]
        return None
