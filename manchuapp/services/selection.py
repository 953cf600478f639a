"""Active token selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from manchuapp.services.tokenizer import TokenId

    SelectionListener = Callable[[TokenId | None, TokenId | None], None]


class Selection:
    """
    Holds at most one active token.

    The selection is either empty (unselected) or holds exactly one
    :class:`~manchuapp.services.tokenizer.TokenId`.  Listeners are told about
    every real change with ``(previous, current)``; selecting the token that
    is already active is a no-op and notifies nobody.
    """

    def __init__(self) -> None:
        #: The active token, or None.
        self._active: TokenId | None = None
        #: Change listeners.
        self._listeners: list[SelectionListener] = []

    @property
    def active(self) -> TokenId | None:
        """The active token, or None when nothing is selected."""
        return self._active

    @property
    def is_selected(self) -> bool:
        """Whether a token is active."""
        return self._active is not None

    def subscribe(self, listener: SelectionListener) -> None:
        """
        Register a change listener.

        Args:
            listener: Called with ``(previous, current)`` after each change

        """
        self._listeners.append(listener)

    def select(self, token_id: TokenId) -> bool:
        """
        Make ``token_id`` the active token.

        Returns:
            True if the selection changed, False if it was already active

        """
        if token_id == self._active:
            return False
        self._set(token_id)
        return True

    def clear(self) -> bool:
        """
        Drop the active token.

        Returns:
            True if a token was active

        """
        if self._active is None:
            return False
        self._set(None)
        return True

    def _set(self, token_id: TokenId | None) -> None:
        previous = self._active
        self._active = token_id
        for listener in self._listeners:
            listener(previous, token_id)
