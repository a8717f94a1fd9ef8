"""Export adapters for decoded sessions."""

from dialysis_log.adapters.exporters.csv_exporter import CSV_HEADERS, CSVExporter

__all__ = ["CSV_HEADERS", "CSVExporter"]
