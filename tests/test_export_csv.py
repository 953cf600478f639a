"""Unit tests for CSVExporter."""

from manchuapp.services.export_csv import BOM, CSVExporter
from tests.conftest import make_record


class TestCSVExporter:
    """Test cases for CSVExporter."""

    def test_quote_doubles_inner_quotes(self):
        """Test quote() wraps the field and doubles inner quotes."""
        assert CSVExporter.quote('He said "hi"') == '"He said ""hi"""'

    def test_quote_none(self):
        """Test a missing field is exported empty."""
        assert CSVExporter.quote(None) == '""'

    def test_export_exact_bytes(self):
        """Test the exact byte output for one record."""
        records = [make_record(1, "a b", "x y", 'He said "hi"')]
        data = CSVExporter().export_csv(records)
        expected = '\ufeffManchu,Latin,English\n"a b","x y","He said ""hi"""'
        assert data == expected.encode("utf-8")

    def test_starts_with_bom(self):
        """Test the output starts with the UTF-8 byte-order mark."""
        data = CSVExporter().export_csv([])
        assert data.startswith(b"\xef\xbb\xbf")
        assert data.decode("utf-8") == BOM + "Manchu,Latin,English"

    def test_no_trailing_newline(self, sample_records):
        """Test rows are newline-joined without a trailing newline."""
        text = CSVExporter().render(sample_records)
        assert not text.endswith("\n")
        assert len(text.split("\n")) == 3

    def test_commas_and_newlines_stay_inside_quotes(self):
        """Test embedded commas and newlines are kept verbatim in the field."""
        text = CSVExporter().render([make_record(1, "a,b", "c\nd", None)])
        assert text == 'Manchu,Latin,English\n"a,b","c\nd",""'

    def test_filename(self):
        """Test the filename uses the query, or 'all' when it is empty."""
        assert CSVExporter.filename("amba") == "manchu_dataset_amba.csv"
        assert CSVExporter.filename("") == "manchu_dataset_all.csv"

    def test_export_writes_file(self, tmp_path, sample_records):
        """Test export() writes the bytes to disk."""
        output = tmp_path / "out.csv"
        exporter = CSVExporter()
        result = exporter.export(sample_records, output)
        assert result == output
        assert output.read_bytes() == exporter.export_csv(sample_records)
