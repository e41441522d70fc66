"""
API tests for user and sales history routes.

Run: pytest tests/unit/test_user_and_sales_routes.py -v
"""

import pytest

from tests.factories import UserFactory, SalesOrderFactory


@pytest.fixture
def client(test_client_with_mock_db, seeded_catalog):
    """Test client with one warehouse user on the seeded store."""
    seeded_catalog.set_table_data("users", [
        UserFactory.create(id=1, name="Budi Santoso", email="budi@gudang.id", location_id=1),
    ])
    return test_client_with_mock_db


class TestUserEndpoints:
    """/api/users"""

    def test_list_users(self, client):
        response = client.get("/api/users")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["email"] == "budi@gudang.id"
        assert body[0]["location_name"] == "Gudang Utama"

    def test_create_user(self, client):
        """Should return 201 with the stored user."""
        response = client.post("/api/users", json={
            "name": "Dewi Lestari",
            "email": "dewi@gudang.id",
            "role": "Store Cashier",
            "location_id": 2,
        })

        assert response.status_code == 201
        assert response.json()["role"] == "Store Cashier"

    def test_duplicate_email_returns_409(self, client):
        response = client.post("/api/users", json={
            "name": "Budi Lain",
            "email": "budi@gudang.id",
            "role": "Admin",
        })

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "USER_EMAIL_EXISTS"

    def test_unknown_role_rejected(self, client):
        response = client.post("/api/users", json={
            "name": "X",
            "email": "x@gudang.id",
            "role": "Owner",
        })

        assert response.status_code == 422

    def test_delete_deactivates(self, client, mock_supabase):
        """Should answer 204 and keep the row inactive."""
        response = client.delete("/api/users/1")

        assert response.status_code == 204
        assert mock_supabase.rows("users")[0]["is_active"] is False

    def test_unknown_user_returns_404(self, client):
        response = client.get("/api/users/99")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"


class TestSalesHistoryEndpoint:
    """GET /api/sales/history"""

    def test_lists_store_sales(self, client, mock_supabase):
        # Arrange
        order, lines = SalesOrderFactory.create(id=5, line_count=2)
        mock_supabase.set_table_data("sales_orders", [order])
        mock_supabase.set_table_data("sales_order_items", lines)

        # Act
        response = client.get("/api/sales/history", params={"location_id": 2})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body[0]["order_number"] == "SO-000005"
        assert body[0]["item_count"] == 2
        assert body[0]["customer_name"] == "Walk-in Customer"

    def test_location_is_required(self, client):
        response = client.get("/api/sales/history")

        assert response.status_code == 422
