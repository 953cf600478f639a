"""Unit tests for ResultSetManager."""

from unittest.mock import Mock

import pytest

from manchuapp.exc import StorageFailed
from manchuapp.services.results import ResultSetManager
from manchuapp.services.tokenizer import TokenId
from tests.conftest import make_record


@pytest.fixture
def manager():
    """Result set manager over a mocked store."""
    return ResultSetManager(Mock())


class TestResultSetManager:
    """Test cases for ResultSetManager."""

    def test_complete_replaces_records_and_index(self, manager, sample_records):
        """Test a completion replaces the records and the index together."""
        seq = manager.begin("amba")
        assert manager.complete(seq, sample_records) is True
        assert manager.records == sample_records
        assert TokenId(2, 3) in manager.index
        assert manager.query == "amba"

    def test_complete_clears_selection(self, manager, sample_records):
        """Test a new result set resets the selection."""
        manager.complete(manager.begin(), sample_records)
        manager.selection.select(TokenId(1, 0))
        manager.complete(manager.begin(), sample_records)
        assert manager.selection.active is None

    def test_stale_completion_is_discarded(self, manager, sample_records):
        """Test a slow earlier response cannot overwrite a later one."""
        first = manager.begin("first")
        second = manager.begin("second")
        later = [make_record(9, "ᠠ", "a")]
        assert manager.complete(second, later) is True
        assert manager.complete(first, sample_records) is False
        assert manager.records == later
        assert manager.query == "second"

    def test_stale_completion_keeps_selection(self, manager, sample_records):
        """Test a discarded response leaves the selection alone."""
        first = manager.begin()
        second = manager.begin()
        manager.complete(second, sample_records)
        manager.selection.select(TokenId(1, 1))
        manager.complete(first, [])
        assert manager.selection.active == TokenId(1, 1)

    def test_fail_keeps_previous_state(self, manager, sample_records):
        """Test a failure leaves the records, index and selection intact."""
        manager.complete(manager.begin(), sample_records)
        manager.selection.select(TokenId(2, 1))
        index = manager.index
        assert manager.fail(manager.begin(), StorageFailed("search", "boom")) is True
        assert manager.records == sample_records
        assert manager.index is index
        assert manager.selection.active == TokenId(2, 1)

    def test_fail_of_stale_request(self, manager):
        """Test fail() reports False for a superseded request."""
        first = manager.begin()
        manager.begin()
        assert manager.fail(first, "boom") is False

    def test_search(self, manager, sample_records):
        """Test search() passes the query through unchanged."""
        manager.store.search.return_value = sample_records
        assert manager.search("  Amba ") == sample_records
        manager.store.search.assert_called_once_with("  Amba ")
        assert manager.query == "  Amba "

    def test_search_failure_reraises_and_keeps_state(self, manager, sample_records):
        """Test search() re-raises StorageFailed and keeps the result set."""
        manager.store.search.return_value = sample_records
        manager.search("amba")
        manager.store.search.side_effect = StorageFailed("search", "offline")
        with pytest.raises(StorageFailed):
            manager.search("baita")
        assert manager.records == sample_records
        assert manager.query == "amba"

    def test_record(self, manager, sample_records):
        """Test record() looks up a record of the result set by ID."""
        manager.complete(manager.begin(), sample_records)
        assert manager.record(2) is sample_records[1]
        assert manager.record(3) is None
