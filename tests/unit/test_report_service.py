"""
Unit tests for ReportService.get_conversion_history().

Run: pytest tests/unit/test_report_service.py -v
"""

from datetime import date

import pytest

from services.report_service import ReportService, STATUS_PENDING, STATUS_COMPLETED
from exceptions import DatabaseError
from tests.factories import ConversionFactory, TransactionFactory


@pytest.fixture
def service(mock_db, seeded_catalog):
    """ReportService on the seeded in-memory store."""
    return ReportService()


class TestConversionHistory:
    """Tests for ReportService.get_conversion_history()"""

    def test_pending_while_boxes_wait(self, service, mock_supabase):
        """Should report Pending Count while the tracker has ready boxes."""
        # Arrange
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1, box_qty=2, pair_qty=80),
        ])
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(ready_box_count=1, expected_pairs=80, actual_pairs_entered=30),
        ])

        # Act
        item = service.get_conversion_history()[0]

        # Assert
        assert item.status == STATUS_PENDING
        assert item.box_count == 2
        assert item.expected_pairs == 80
        assert item.actual_pairs == 30
        assert item.product_name == "Sandal Kulit"
        assert item.location_name == "Gudang Utama"

    def test_completed_when_all_boxes_counted(self, service, mock_supabase):
        """Should report Completed once ready boxes reach zero."""
        # Arrange
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1),
        ])
        mock_supabase.set_table_data("box_conversions", [
            ConversionFactory.create(ready_box_count=0, expected_pairs=80, actual_pairs_entered=80),
        ])

        # Act
        item = service.get_conversion_history()[0]

        # Assert
        assert item.status == STATUS_COMPLETED

    def test_ignores_other_movement_types(self, service, mock_supabase):
        """Should only report CONVERSION_BOXES_OPENED rows."""
        # Arrange
        receipt = TransactionFactory.create_boxes_opened(id=2)
        receipt["type"] = "GOODS_RECEIPT"
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1),
            receipt,
        ])

        # Act
        items = service.get_conversion_history()

        # Assert
        assert [i.id for i in items] == [1]

    def test_date_range_includes_whole_end_day(self, service, mock_supabase):
        """Should keep batches opened late on the end date."""
        # Arrange
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1, transaction_date="2026-03-09T10:00:00+00:00"),
            TransactionFactory.create_boxes_opened(id=2, transaction_date="2026-03-10T21:45:00+00:00"),
            TransactionFactory.create_boxes_opened(id=3, transaction_date="2026-03-11T07:00:00+00:00"),
        ])

        # Act
        items = service.get_conversion_history(start_date=date(2026, 3, 10), end_date=date(2026, 3, 10))

        # Assert
        assert [i.id for i in items] == [2]

    def test_newest_first(self, service, mock_supabase):
        """Should order by transaction date descending."""
        # Arrange
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1, transaction_date="2026-03-01T08:00:00+00:00"),
            TransactionFactory.create_boxes_opened(id=2, transaction_date="2026-03-04T08:00:00+00:00"),
        ])

        # Act
        items = service.get_conversion_history()

        # Assert
        assert [i.id for i in items] == [2, 1]

    def test_untracked_batch_has_no_actual_pairs(self, service, mock_supabase):
        """Should report Completed with no actual pairs when the tracker row is gone."""
        # Arrange
        mock_supabase.set_table_data("inventory_transactions", [
            TransactionFactory.create_boxes_opened(id=1),
        ])
        mock_supabase.set_table_data("box_conversions", [])

        # Act
        item = service.get_conversion_history()[0]

        # Assert
        assert item.actual_pairs is None
        assert item.status == STATUS_COMPLETED

    def test_failure_raises_database_error(self, service, mock_supabase):
        """Should wrap client failures."""
        mock_supabase.fail_on("inventory_transactions", "select")

        with pytest.raises(DatabaseError):
            service.get_conversion_history()
