"""Result set manager: the current search results and their token index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manchuapp.exc import StorageFailed
from manchuapp.services.alignment import AlignmentIndex
from manchuapp.services.selection import Selection
from manchuapp.services.sequence import RequestSequencer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from manchuapp.models.record import Record
    from manchuapp.services.storage import CorpusStore

logger = logging.getLogger(__name__)


class ResultSetManager:
    """
    Owns the records of the last search, their alignment index and the
    active token selection.

    A search is a request/completion pair: :meth:`begin` issues a sequence
    number, and :meth:`complete` or :meth:`fail` delivers the outcome.  Only
    the outcome of the most recent request is applied.  A successful
    completion replaces the records and the index together and clears the
    selection; a failure leaves everything as it was.

    Args:
        store: The corpus store to query

    """

    def __init__(self, store: CorpusStore) -> None:
        self.store = store
        #: Records of the current result set.
        self.records: list[Record] = []
        #: Alignment index over :attr:`records`.
        self.index = AlignmentIndex()
        #: The active token.
        self.selection = Selection()
        #: The query that produced :attr:`records`.
        self.query: str = ""
        self._sequencer = RequestSequencer()
        self._pending_queries: dict[int, str] = {}

    def begin(self, query: str = "") -> int:
        """
        Start a search request.

        Args:
            query: The query being sent, remembered for the result set

        Returns:
            The request's sequence number

        """
        seq = self._sequencer.issue()
        self._pending_queries = {seq: query}
        return seq

    def complete(self, seq: int, records: Sequence[Record]) -> bool:
        """
        Deliver the records of a search request.

        Args:
            seq: Sequence number returned by :meth:`begin`
            records: Records returned by the store

        Returns:
            True if the records were applied, False if the response was stale

        """
        if not self._sequencer.is_current(seq):
            logger.debug(f"Discarding stale search response #{seq}")
            return False
        new_records = list(records)
        new_index = AlignmentIndex(new_records)
        self.records = new_records
        self.index = new_index
        self.query = self._pending_queries.pop(seq, "")
        self.selection.clear()
        return True

    def fail(self, seq: int, error: Exception | str) -> bool:
        """
        Deliver the failure of a search request.  The current result set is
        kept.

        Returns:
            True if the failure belongs to the latest request

        """
        current = self._sequencer.is_current(seq)
        self._pending_queries.pop(seq, None)
        if current:
            logger.error(f"Search #{seq} failed: {error!s}")
        else:
            logger.debug(f"Ignoring failure of stale search #{seq}: {error!s}")
        return current

    def search(self, query: str) -> list[Record]:
        """
        Run a search synchronously.

        Args:
            query: Text to look for, passed to the store unchanged

        Raises:
            StorageFailed: If the store reports an error; the previous result
                set is kept

        Returns:
            The records of the new result set

        """
        seq = self.begin(query)
        try:
            records = self.store.search(query)
        except StorageFailed as e:
            self.fail(seq, e)
            raise
        self.complete(seq, records)
        logger.info(f"Search {query!r} matched {len(records)} entries")
        return self.records

    def record(self, record_id: int) -> Record | None:
        """
        Get a record of the current result set by ID.
        """
        for record in self.records:
            if record.id == record_id:
                return record
        return None
