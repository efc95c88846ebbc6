"""CSV export of projected Pipedrive records."""

from pipedrive_export.export.csv_writer import write_rows
from pipedrive_export.export.exporter import CsvExporter, ExportResult

__all__ = ["CsvExporter", "ExportResult", "write_rows"]
