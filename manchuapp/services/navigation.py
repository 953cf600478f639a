"""Keyboard navigation between aligned tokens."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from manchuapp.services.alignment import AlignmentIndex
    from manchuapp.services.selection import Selection
    from manchuapp.services.tokenizer import TokenId


class Direction(Enum):
    """Direction of a navigation command."""

    NEXT = 1
    PREVIOUS = -1


class NavigationController:
    """
    Moves the active token within its record.

    Navigation never wraps around and never leaves the record of the active
    token: alignment is only defined inside a record.  Commands that cannot
    move (no active token, or already at the first/last token) do nothing.

    Args:
        selection: The selection to move
        index_provider: Returns the alignment index of the current result set

    Keyword Args:
        scroll_to: Called with the new active token after every move

    """

    def __init__(
        self,
        selection: Selection,
        index_provider: Callable[[], AlignmentIndex],
        scroll_to: Callable[[TokenId], None] | None = None,
    ) -> None:
        self.selection = selection
        self.index_provider = index_provider
        self.scroll_to = scroll_to

    def on_direction(self, direction: Direction) -> TokenId | None:
        """
        Move the active token one step in ``direction``.

        Args:
            direction: Where to move

        Returns:
            The new active token, or None if nothing moved

        """
        current = self.selection.active
        if current is None:
            return None
        index = self.index_provider()
        siblings = index.siblings(current.record_id)
        position = index.index_of(current, siblings)
        if position < 0:
            return None
        target = position + direction.value
        if not 0 <= target < len(siblings):
            return None
        new_token = siblings[target]
        self.selection.select(new_token)
        self._scroll(new_token)
        return new_token

    def next(self) -> TokenId | None:
        """Move to the next token of the record."""
        return self.on_direction(Direction.NEXT)

    def previous(self) -> TokenId | None:
        """Move to the previous token of the record."""
        return self.on_direction(Direction.PREVIOUS)

    def activate(self, token_id: TokenId) -> bool:
        """
        Make a clicked token active and bring it into view.  Clicking the
        token that is already active does nothing.

        Returns:
            True if the selection changed

        """
        changed = self.selection.select(token_id)
        if changed:
            self._scroll(token_id)
        return changed

    def _scroll(self, token_id: TokenId) -> None:
        if self.scroll_to is not None:
            self.scroll_to(token_id)
