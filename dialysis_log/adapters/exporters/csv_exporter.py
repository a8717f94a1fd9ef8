"""CSV Export Adapter.

This adapter implements the ExporterPort contract for CSV documents. The
document layout is fixed so that files produced here are interchangeable
with the ones the device vendor's converter produced:

    date,time,patient_id,patient_name,dialyzer_id,volume,prs
    2024-03-05,09:07,42,JANE DOE,DZ-100,1500,P

Rows are joined with ``\\n`` and the document has no trailing newline.

Quoting:
    - ``none`` (default): fields are joined with ``,`` as-is. A comma or
      newline inside a text field shifts the columns of that row; the
      device keyboard does not produce either character.
    - ``minimal``: fields containing ``,``, ``"``, ``\\r`` or ``\\n`` are
      quoted RFC 4180 style.
"""

import csv
import io
import logging
import re
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from dialysis_log.domain.enums import CSVQuoting
from dialysis_log.domain.ports import ExportError, ExporterPort
from dialysis_log.domain.session_record import ConversionSession, SessionRecord

logger = logging.getLogger(__name__)

CSV_HEADERS = ['date', 'time', 'patient_id', 'patient_name', 'dialyzer_id', 'volume', 'prs']

EXPORT_SUFFIX = "_converted.csv"

# Final extension: a dot followed by anything but dots and slashes, at the end
_EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")


class CSVExporter(ExporterPort):
    """Serialize sessions to CSV.

    Parameters:
        quoting: Field quoting mode (default: no quoting)
        encoding: Encoding used when writing files (default: utf-8)
    """

    def __init__(self, quoting: Union[CSVQuoting, str] = CSVQuoting.NONE, encoding: str = "utf-8"):
        self.quoting = CSVQuoting(quoting)
        self.encoding = encoding

    @staticmethod
    def export_filename(source_name: str) -> str:
        """Derive the CSV filename from the source filename.

        ``session.bin`` becomes ``session_converted.csv``; only the final
        extension is removed, so ``a.tar.gz`` becomes ``a.tar_converted.csv``.
        """
        return _EXTENSION_PATTERN.sub("", source_name) + EXPORT_SUFFIX

    @staticmethod
    def _row_values(record: SessionRecord) -> list[str]:
        return [str(value) for value in record.to_row().values()]

    def render_records(self, records: Iterable[SessionRecord]) -> str:
        """Serialize records to a CSV document (header included)."""
        rows = [CSV_HEADERS] + [self._row_values(record) for record in records]

        if self.quoting is CSVQuoting.NONE:
            return "\n".join(",".join(row) for row in rows)

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerows(rows)
        return buffer.getvalue()[:-1]

    def render(self, session: ConversionSession) -> str:
        """Serialize a session to a CSV document."""
        return self.render_records(session.records)

    def write(self, session: ConversionSession, output_dir: Union[str, Path]) -> Path:
        """Write the session's CSV document into output_dir.

        Parameters:
            session: Decoded session
            output_dir: Destination directory (must exist)

        Returns:
            Path: Written file

        Raises:
            ExportError: If the file cannot be written
        """
        destination = Path(output_dir) / self.export_filename(session.filename)
        document = self.render(session)

        try:
            with open(destination, "w", encoding=self.encoding, newline="") as handle:
                handle.write(document)
        except OSError as e:
            raise ExportError(
                f"Cannot write {destination}: {e.strerror or e}",
                destination=str(destination)
            ) from e

        logger.info(f"Wrote {session.record_count} records to {destination}")
        return destination

    @staticmethod
    def to_dataframe(records: Iterable[SessionRecord]) -> pd.DataFrame:
        """Return records as a DataFrame with the CSV column names."""
        return pd.DataFrame([record.to_row() for record in records], columns=CSV_HEADERS)

    def parse(self, document: str) -> pd.DataFrame:
        """Read an exported document back by the same column contract.

        Every column is read as text and empty fields stay empty strings, so
        values compare equal to what was written. Quote characters are only
        interpreted when this exporter quotes its output.

        Parameters:
            document: CSV text as produced by ``render``

        Returns:
            pd.DataFrame: One row per record, columns ``CSV_HEADERS``
        """
        quoting = csv.QUOTE_NONE if self.quoting is CSVQuoting.NONE else csv.QUOTE_MINIMAL
        frame = pd.read_csv(
            io.StringIO(document),
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            quoting=quoting,
        )
        missing = [column for column in CSV_HEADERS if column not in frame.columns]
        if missing:
            raise ValueError(f"CSV document is missing columns: {', '.join(missing)}")
        return frame[CSV_HEADERS]
