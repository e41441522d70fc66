"""
Unit tests for UserService.

Run: pytest tests/unit/test_user_service.py -v
"""

import pytest

from services.user_service import UserService
from models.user import UserCreate, UserUpdate, UserRole
from exceptions import (
    UserNotFoundError,
    UserEmailExistsError,
    LocationNotFoundError,
    DatabaseError,
)
from tests.factories import UserFactory


@pytest.fixture
def service(mock_db, seeded_catalog):
    """UserService on the seeded in-memory store."""
    seeded_catalog.set_table_data("users", [
        UserFactory.create(id=1, name="Siti Rahma", email="siti@gudang.id", role="Admin", location_id=None),
        UserFactory.create(id=2, name="Budi Santoso", email="budi@gudang.id", location_id=1),
        UserFactory.create(id=3, name="Andi Wijaya", email="andi@gudang.id", role="Store Cashier",
                           location_id=2, is_active=False),
    ])
    return UserService()


def _user(**overrides) -> UserCreate:
    data = {
        "name": "Dewi Lestari",
        "email": "Dewi@Gudang.id",
        "role": UserRole.STORE_CASHIER,
        "location_id": 2,
    }
    data.update(overrides)
    return UserCreate(**data)


class TestUserRead:
    """Tests for UserService.get_all() and get_by_id()"""

    def test_get_all_ordered_by_name(self, service):
        """Should sort by name and resolve location names."""
        users = service.get_all()

        assert [u.name for u in users] == ["Andi Wijaya", "Budi Santoso", "Siti Rahma"]
        assert [u.location_name for u in users] == ["Toko Pasar Baru", "Gudang Utama", None]

    def test_active_only_skips_deactivated(self, service):
        """Should hide inactive users when asked."""
        users = service.get_all(active_only=True)

        assert [u.id for u in users] == [2, 1]

    def test_get_by_id_not_found(self, service):
        """Should raise UserNotFoundError."""
        with pytest.raises(UserNotFoundError) as exc_info:
            service.get_by_id(99)

        assert exc_info.value.status_code == 404
        assert "USER_NOT_FOUND" in exc_info.value.code


class TestUserCreate:
    """Tests for UserService.create()"""

    def test_creates_with_lowercase_email(self, service, mock_supabase):
        """Should store the normalized email and return the location name."""
        # Act
        user = service.create(_user())

        # Assert
        assert user.id == 4
        assert user.email == "dewi@gudang.id"
        assert user.role == UserRole.STORE_CASHIER
        assert user.location_name == "Toko Pasar Baru"
        assert user.is_active is True
        assert mock_supabase.rows("users")[-1]["role"] == "Store Cashier"

    def test_duplicate_email_refused(self, service, mock_supabase):
        """Should raise UserEmailExistsError and insert nothing."""
        with pytest.raises(UserEmailExistsError) as exc_info:
            service.create(_user(email="BUDI@gudang.id"))

        assert exc_info.value.status_code == 409
        assert len(mock_supabase.rows("users")) == 3

    def test_unknown_location_refused(self, service):
        """Should raise LocationNotFoundError for a missing location."""
        with pytest.raises(LocationNotFoundError):
            service.create(_user(location_id=42))

    def test_admin_without_location(self, service):
        """Should allow users not bound to a location."""
        user = service.create(_user(role=UserRole.ADMIN, location_id=None))

        assert user.location_id is None
        assert user.location_name is None

    def test_invalid_email_rejected_by_schema(self):
        """Should fail validation before reaching the store."""
        with pytest.raises(ValueError):
            _user(email="not-an-email")

    def test_store_failure_raises_database_error(self, service, mock_supabase):
        """Should wrap client failures."""
        mock_supabase.fail_on("users", "insert")

        with pytest.raises(DatabaseError):
            service.create(_user())


class TestUserUpdate:
    """Tests for UserService.update() and deactivate()"""

    def test_partial_update_keeps_other_fields(self, service):
        """Should only change provided fields."""
        user = service.update(2, UserUpdate(location_id=2))

        assert user.location_name == "Toko Pasar Baru"
        assert user.email == "budi@gudang.id"
        assert user.role == UserRole.WAREHOUSE_STAFF

    def test_keeping_own_email_is_allowed(self, service):
        """Should not treat the user's own email as taken."""
        user = service.update(2, UserUpdate(email="budi@gudang.id", name="Budi S."))

        assert user.name == "Budi S."

    def test_taking_another_email_refused(self, service, mock_supabase):
        """Should raise UserEmailExistsError."""
        with pytest.raises(UserEmailExistsError):
            service.update(2, UserUpdate(email="siti@gudang.id"))

        assert ("users", "update") not in mock_supabase.calls

    def test_update_missing_raises(self, service):
        """Should raise UserNotFoundError."""
        with pytest.raises(UserNotFoundError):
            service.update(99, UserUpdate(name="Nobody"))

    def test_deactivate_keeps_row(self, service, mock_supabase):
        """Should flag the user inactive instead of deleting."""
        user = service.deactivate(2)

        assert user.is_active is False
        stored = next(r for r in mock_supabase.rows("users") if r["id"] == 2)
        assert stored["is_active"] is False
        assert len(mock_supabase.rows("users")) == 3
