"""Tests for CSV export orchestration."""

import csv
from pathlib import Path

import pytest

from pipedrive_export.connectors.pipedrive import PipedriveConnector
from pipedrive_export.export import CsvExporter
from pipedrive_export.export.exporter import EXPORT_FUNCTIONS, split_prices
from pipedrive_export.models.object_type import ObjectType


def _read_csv(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


@pytest.fixture
def exporter(connection, fake_api, tmp_path: Path) -> CsvExporter:
    """Exporter writing into a temporary directory through the fake API."""
    connector = PipedriveConnector(connection, client=fake_api.client())
    return CsvExporter(connector, tmp_path / "export_data")


class TestSplitPrices:
    """Tests for split_prices."""

    def test_tags_parent_and_strips_ids(self) -> None:
        """Price rows carry the product name and drop id/product_id."""
        products = [
            {
                "id": 1,
                "name": "Widget",
                "prices": [
                    {"id": 10, "product_id": 1, "price": 9.5, "currency": "EUR", "cost": 4},
                    {"id": 11, "product_id": 1, "price": 11, "currency": "USD", "cost": 5},
                ],
            },
            {"id": 2, "name": "Gadget", "prices": []},
            {"id": 3, "name": "Nothing"},
        ]
        rows = split_prices(products)
        assert rows == [
            {"product_name": "Widget", "price": 9.5, "currency": "EUR", "cost": 4},
            {"product_name": "Widget", "price": 11, "currency": "USD", "cost": 5},
        ]
        assert list(rows[0].keys())[0] == "product_name"


class TestCsvExporter:
    """Tests for CsvExporter."""

    def test_every_object_type_has_export_function(self) -> None:
        """The dispatch table covers all object types."""
        assert set(EXPORT_FUNCTIONS) == set(ObjectType)

    def test_export_deals(self, exporter, fake_api, page) -> None:
        """Deals are labelled, projected and written to deals.csv."""
        fake_api.add("/dealFields", page([
            {"key": "title", "name": "Title"},
            {"key": "org_name", "name": "Organization"},
        ]))
        fake_api.add("/deals", page([{"id": 1, "title": "Deal A", "org_name": "Acme"}], more=True, start=0, limit=1))
        fake_api.add("/deals", page([{"id": 2, "title": "Deal B", "status": "won"}], start=1, limit=1))

        results = exporter.execute(ObjectType.DEAL)

        assert [r.path.name for r in results] == ["deals.csv"]
        assert results[0].rows == 2
        rows = _read_csv(results[0].path)
        assert rows[0] == [
            "Title", "Organization", "person_name", "formatted_value",
            "currency", "status", "expected_close_date",
        ]
        assert rows[1][:2] == ["Deal A", "Acme"]
        assert rows[2][0] == "Deal B"
        assert rows[2][5] == "won"

    def test_export_products_writes_prices(self, exporter, fake_api, page) -> None:
        """Products export writes products.csv and product_prices.csv."""
        fake_api.add("/productFields", page([{"key": "name", "name": "Product name"}]))
        fake_api.add("/products", page([
            {
                "id": 5,
                "name": "Widget",
                "code": "W-1",
                "prices": [{"id": 50, "product_id": 5, "price": 10, "currency": "EUR"}],
            }
        ]))

        results = exporter.execute("products")

        assert [r.path.name for r in results] == ["products.csv", "product_prices.csv"]
        products = _read_csv(results[0].path)
        assert products[0][:3] == ["id", "Product name", "code"]
        assert "prices" not in products[0]
        assert products[1][:3] == ["5", "Widget", "W-1"]
        prices = _read_csv(results[1].path)
        assert prices == [["product_name", "price", "currency"], ["Widget", "10", "EUR"]]

    def test_empty_result_writes_empty_file(self, exporter, fake_api, page) -> None:
        """No records still creates the file, with no header."""
        fake_api.add("/personFields", page([]))
        fake_api.add("/persons", page(None))
        results = exporter.execute(ObjectType.PERSON)
        assert results[0].rows == 0
        assert results[0].path.read_text() == ""

    def test_creates_export_dir(self, exporter, fake_api, page) -> None:
        """The export directory is created on demand."""
        fake_api.add("/activityFields", page([]))
        fake_api.add("/activities", page([{"id": 1, "type": "call"}]))
        assert not exporter.export_dir.exists()
        exporter.execute(ObjectType.ACTIVITY)
        assert (exporter.export_dir / "activities.csv").exists()

    @pytest.mark.parametrize(
        "object_type,fields_path,path",
        [
            (ObjectType.LEAD, "/dealFields", "/leads"),
            (ObjectType.PRODUCT, "/productFields", "/products"),
        ],
    )
    def test_labels_fetched_before_records(
        self, exporter, fake_api, page, object_type, fields_path, path
    ) -> None:
        """The metadata endpoint is requested before the list endpoint."""
        fake_api.add(fields_path, page([]))
        fake_api.add(path, page([]))
        exporter.execute(object_type)
        assert [r.url.path for r in fake_api.requests] == ["/v1" + fields_path, "/v1" + path]

    def test_colliding_labels_keep_every_column(self, exporter, fake_api, page) -> None:
        """A label equal to another field's column name does not drop a column."""
        fake_api.add("/personFields", page([{"key": "name", "name": "person_name"}]))
        fake_api.add("/persons", page([{"id": 1, "name": "Ann", "person_name": "Ann B."}]))
        results = exporter.execute(ObjectType.PERSON)
        rows = _read_csv(results[0].path)
        assert rows[0][:3] == ["id", "person_name", "person_name (person_name)"]
        assert rows[1][:3] == ["1", "Ann", "Ann B."]
        assert len(rows[0]) == 7

    def test_export_all_runs_in_order(self, exporter, fake_api, page) -> None:
        """export_all runs each job to completion in the given order."""
        fake_api.add("/dealFields", page([]))
        fake_api.add("/deals", page([{"title": "A"}]))
        fake_api.add("/dealFields", page([]))
        fake_api.add("/leads", page([{"id": "l1"}]))

        results = exporter.export_all(["deal", ObjectType.LEAD])

        assert list(results) == [ObjectType.DEAL, ObjectType.LEAD]
        assert [r.url.path for r in fake_api.requests] == [
            "/v1/dealFields", "/v1/deals", "/v1/dealFields", "/v1/leads",
        ]

    def test_unknown_type_raises(self, exporter) -> None:
        """Unknown object types are rejected before any request."""
        with pytest.raises(ValueError, match="Unknown object type: notes"):
            exporter.execute("notes")
