"""Export orchestration: one CSV file per object type."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pipedrive_export.connectors.pipedrive import PipedriveConnector
from pipedrive_export.connectors.pipedrive.constants import (
    ENDPOINTS,
    PRICE_ID_FIELDS,
    PRICE_PARENT_FIELD,
    PRICES_FIELD,
    PRICES_FILE_STEM,
    EndpointDescriptor,
)
from pipedrive_export.export.csv_writer import write_rows
from pipedrive_export.models.object_type import ObjectType
from pipedrive_export.projection import project_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """One file written by an export."""

    path: Path
    rows: int


def split_prices(products: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Pull each product's nested `prices` list out into flat price rows.
    Rows are tagged with the product name and lose their identifier fields.
    """
    price_rows: list[dict[str, Any]] = []
    for product in products:
        for price in product.get(PRICES_FIELD) or []:
            row: dict[str, Any] = {PRICE_PARENT_FIELD: product.get("name")}
            row.update({k: v for k, v in price.items() if k not in PRICE_ID_FIELDS})
            price_rows.append(row)
    return price_rows


class CsvExporter:
    """Fetches, projects and writes Pipedrive records to CSV files under export_dir."""

    def __init__(self, connector: PipedriveConnector, export_dir: str | Path):
        self._connector = connector
        self._export_dir = Path(export_dir)

    @property
    def export_dir(self) -> Path:
        return self._export_dir

    def execute(self, object_type: ObjectType | str) -> list[ExportResult]:
        """Export one object type. Returns the files written."""
        object_type = ObjectType.parse(object_type)
        self._export_dir.mkdir(parents=True, exist_ok=True)
        export_function = EXPORT_FUNCTIONS[object_type]
        return export_function(self, ENDPOINTS[object_type])

    def export_all(self, object_types: Iterable[ObjectType | str]) -> dict[ObjectType, list[ExportResult]]:
        """Run exports one after another, in the given order."""
        results: dict[ObjectType, list[ExportResult]] = {}
        for object_type in object_types:
            object_type = ObjectType.parse(object_type)
            results[object_type] = self.execute(object_type)
        return results

    def _write(self, file_stem: str, rows: list[dict[str, Any]]) -> ExportResult:
        path = self._export_dir / f"{file_stem}.csv"
        with path.open("w", newline="", encoding="utf-8") as f:
            count = write_rows(f, rows)
        logger.info("Wrote %d rows to %s", count, path)
        return ExportResult(path=path, rows=count)

    def export_records(self, descriptor: EndpointDescriptor) -> list[ExportResult]:
        """Default export: labelled rows to {file_stem}.csv."""
        rows = self._connector.fetch_rows(descriptor)
        return [self._write(descriptor.file_stem, rows)]

    def export_products(self, descriptor: EndpointDescriptor) -> list[ExportResult]:
        """Products plus their nested prices in a separate product_prices.csv."""
        labels = self._connector.field_labels(descriptor)
        records = self._connector.fetch_records(descriptor)
        rows = project_all(descriptor.fields, labels, records)
        return [
            self._write(descriptor.file_stem, rows),
            self._write(PRICES_FILE_STEM, split_prices(records)),
        ]


EXPORT_FUNCTIONS: dict[ObjectType, Callable[[CsvExporter, EndpointDescriptor], list[ExportResult]]] = {
    ObjectType.DEAL: CsvExporter.export_records,
    ObjectType.PRODUCT: CsvExporter.export_products,
    ObjectType.ACTIVITY: CsvExporter.export_records,
    ObjectType.LEAD: CsvExporter.export_records,
    ObjectType.PERSON: CsvExporter.export_records,
}
