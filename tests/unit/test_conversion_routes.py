"""
API tests for conversion, stock and report routes.

Run: pytest tests/unit/test_conversion_routes.py -v
"""

from unittest.mock import patch, MagicMock

import pytest

from exceptions import NoBoxesRemainingError, ConversionRetrievalError
from tests.factories import ConversionFactory, BoxStockFactory, TransactionFactory


@pytest.fixture
def client(test_client_with_mock_db, seeded_catalog):
    """Test client on the seeded in-memory store."""
    return test_client_with_mock_db


class TestReadyToCountEndpoint:
    """GET /api/conversions/ready"""

    def test_lists_items_with_derived_fields(self, client, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(id=7, ready_box_count=3, expected_pairs=120, actual_pairs_entered=40),
        ])

        # Act
        response = client.get("/api/conversions/ready")

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["id"] == 7
        assert body[0]["remaining_uncounted"] == 80
        assert body[0]["product_sku"] == "SDL-001"

    def test_retrieval_failure_returns_error_envelope(self, client):
        service = MagicMock()
        service.list_ready_to_count.side_effect = ConversionRetrievalError(1, "timeout")

        with patch("routes.conversions.get_conversion_service", return_value=service):
            response = client.get("/api/conversions/ready")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CONVERSION_RETRIEVAL_FAILED"


class TestFinishBoxEndpoint:
    """POST /api/conversions/{id}/finish-box"""

    def test_decrements_and_returns_item(self, client, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(id=7, ready_box_count=3, expected_pairs=120, actual_pairs_entered=40),
        ])

        # Act
        response = client.post("/api/conversions/7/finish-box")

        # Assert
        assert response.status_code == 200
        assert response.json()["ready_box_count"] == 2
        ready = client.get("/api/conversions/ready").json()
        assert ready[0]["ready_box_count"] == 2

    def test_zero_boxes_returns_409(self, client, mock_supabase):
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(id=7, ready_box_count=0),
        ])

        response = client.post("/api/conversions/7/finish-box")

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "NO_BOXES_REMAINING"
        assert error["message"] == "No boxes left to process"

    def test_unknown_item_returns_404(self, client, mock_supabase):
        mock_supabase.set_table_data("box_conversions", [])

        response = client.post("/api/conversions/999/finish-box")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CONVERSION_ITEM_NOT_FOUND"

    def test_service_error_is_passed_through(self, client):
        service = MagicMock()
        service.finish_one_box.side_effect = NoBoxesRemainingError(5)

        with patch("routes.conversions.get_conversion_service", return_value=service):
            response = client.post("/api/conversions/5/finish-box")

        service.finish_one_box.assert_called_once_with(5)
        assert response.status_code == 409


class TestOpenBoxesEndpoint:
    """POST /api/conversions/open-boxes"""

    def test_opens_boxes(self, client, mock_supabase):
        mock_supabase.set_table_data("box_stock", [BoxStockFactory.create(id=1, box_count=4)])

        response = client.post("/api/conversions/open-boxes", json={
            "product_id": 10, "color_id": 20, "box_count": 2
        })

        assert response.status_code == 201
        assert response.json()["expected_pairs"] == 80
        assert mock_supabase.rows("box_stock")[0]["box_count"] == 2

    def test_insufficient_stock_returns_422(self, client, mock_supabase):
        mock_supabase.set_table_data("box_stock", [BoxStockFactory.create(id=1, box_count=1)])

        response = client.post("/api/conversions/open-boxes", json={
            "product_id": 10, "color_id": 20, "box_count": 2
        })

        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Insufficient stock for conversion"

    def test_zero_box_count_rejected_by_schema(self, client):
        response = client.post("/api/conversions/open-boxes", json={
            "product_id": 10, "color_id": 20, "box_count": 0
        })

        assert response.status_code == 422


class TestPairCountEndpoint:
    """POST /api/conversions/{id}/pair-counts"""

    def test_records_counts(self, client, mock_supabase):
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(id=7, ready_box_count=1, expected_pairs=40),
        ])

        response = client.post("/api/conversions/7/pair-counts", json={
            "counts": [{"size_id": 38, "pair_count": 20}, {"size_id": 39, "pair_count": 20}]
        })

        assert response.status_code == 200
        assert response.json()["remaining_uncounted"] == 0

    def test_empty_counts_returns_422(self, client, mock_supabase):
        mock_supabase.set_table_data("box_conversions", [ConversionFactory.create(id=7)])

        response = client.post("/api/conversions/7/pair-counts", json={"counts": []})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "PAIR_COUNT_EMPTY"


class TestStockAndReportEndpoints:
    """Stock views and conversion history."""

    def test_box_stock(self, client, mock_supabase):
        mock_supabase.set_table_data("box_stock", [BoxStockFactory.create(box_count=6)])

        response = client.get("/api/stock/boxes")

        assert response.status_code == 200
        assert response.json()[0]["box_count"] == 6

    def test_conversion_history(self, client, mock_supabase):
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1),
        ])
        mock_supabase.set_table_data("box_conversions", [ConversionFactory.create(ready_box_count=1)])

        response = client.get("/api/reports/conversion-history")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["status"] == "Pending Count"

    def test_conversion_history_export(self, client, mock_supabase):
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1),
        ])

        response = client.get("/api/reports/conversion-history/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "conversion_history_" in response.headers["content-disposition"]
