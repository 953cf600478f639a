"""CSV export service for Manchu Reader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from manchuapp.models.record import Record

logger = logging.getLogger(__name__)

#: Byte-order mark prepended to the export so spreadsheet tools detect UTF-8
#: and render the Manchu script correctly.
BOM: Final[str] = "\ufeff"


class CSVExporter:
    """
    Exports a result set as CSV.

    The format is fixed: an unquoted ``Manchu,Latin,English`` header, then
    one row per record with every field wrapped in double quotes and inner
    double quotes doubled.  Rows are joined with ``\\n`` and there is no
    trailing newline.
    """

    #: Column header.
    HEADER: ClassVar[tuple[str, str, str]] = ("Manchu", "Latin", "English")
    #: Filename prefix.
    FILENAME_PREFIX: ClassVar[str] = "manchu_dataset"

    @staticmethod
    def quote(field: str | None) -> str:
        """
        Quote a single field.

        Args:
            field: Field value; None is exported as an empty field

        Returns:
            The quoted field

        """
        value = field or ""
        escaped = value.replace('"', '""')
        return f'"{escaped}"'

    def render(self, records: Iterable[Record]) -> str:
        """
        Render records as CSV text, without the byte-order mark.
        """
        lines = [",".join(self.HEADER)]
        lines.extend(
            ",".join(
                [
                    self.quote(record.manchu_text),
                    self.quote(record.latin_text),
                    self.quote(record.english_text),
                ]
            )
            for record in records
        )
        return "\n".join(lines)

    def export_csv(self, records: Iterable[Record]) -> bytes:
        """
        Render records as UTF-8 encoded CSV with a leading byte-order mark.
        """
        return (BOM + self.render(records)).encode("utf-8")

    @classmethod
    def filename(cls, query: str) -> str:
        """
        Get the export filename for a query.

        Args:
            query: The query that produced the result set; may be empty

        Returns:
            ``manchu_dataset_<query>.csv``, with ``all`` for an empty query

        """
        return f"{cls.FILENAME_PREFIX}_{query or 'all'}.csv"

    def export(self, records: Iterable[Record], output_path: Path) -> Path:
        """
        Write records to a CSV file.

        Args:
            records: Records to export
            output_path: File to write

        Raises:
            OSError: If the file cannot be written

        Returns:
            The path written

        """
        data = self.export_csv(records)
        Path(output_path).write_bytes(data)
        logger.info(f"Exported {len(data)} bytes to {output_path}")
        return Path(output_path)
