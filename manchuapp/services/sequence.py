"""Request sequencing for flows with one visible outstanding request."""

import threading


class RequestSequencer:
    """
    Issues increasing sequence numbers for the requests of one flow.

    A response is only applied when it carries the latest issued number, so
    a slow earlier request can never overwrite the result of a later one.
    """

    def __init__(self) -> None:
        #: The last issued sequence number (0 means none issued yet).
        self._latest = 0
        #: Guards ``_latest``; numbers are issued from the UI thread but
        #: checked from wherever the completion is delivered.
        self._lock = threading.Lock()

    @property
    def latest(self) -> int:
        """The last issued sequence number."""
        with self._lock:
            return self._latest

    def issue(self) -> int:
        """
        Issue the next sequence number.

        Returns:
            The new sequence number

        """
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, seq: int) -> bool:
        """
        Check whether ``seq`` is the latest issued number.
        """
        with self._lock:
            return seq == self._latest

    def invalidate(self) -> None:
        """
        Make every outstanding request stale without starting a new one.
        """
        self.issue()
