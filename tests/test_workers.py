"""Unit tests for the background request worker."""

from unittest.mock import Mock

from manchuapp.exc import StorageFailed
from manchuapp.ui.workers import RequestWorker


class TestRequestWorker:
    """Test cases for RequestWorker."""

    def test_run_emits_result(self, qapp):
        """Test a successful call emits its sequence number and result."""
        succeeded, failed, finished = Mock(), Mock(), Mock()
        worker = RequestWorker(3, lambda: ["record"])
        worker.succeeded.connect(succeeded)
        worker.failed.connect(failed)
        worker.finished.connect(finished)

        worker.run()

        succeeded.assert_called_once_with(3, ["record"])
        failed.assert_not_called()
        finished.assert_called_once_with()

    def test_run_emits_failure(self, qapp):
        """Test a raising call emits the exception instead."""
        error = StorageFailed("search", "offline")
        succeeded, failed, finished = Mock(), Mock(), Mock()

        def call():
            raise error

        worker = RequestWorker(4, call)
        worker.succeeded.connect(succeeded)
        worker.failed.connect(failed)
        worker.finished.connect(finished)

        worker.run()

        succeeded.assert_not_called()
        failed.assert_called_once_with(4, error)
        finished.assert_called_once_with()
