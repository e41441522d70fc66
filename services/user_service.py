"""
User service for the staff roster.

Users are never hard-deleted: deleting one deactivates it so receipts
and sales they entered keep a valid reference.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.user import UserCreate, UserUpdate, UserResponse
from exceptions import (
    UserNotFoundError,
    UserEmailExistsError,
    LocationNotFoundError,
    DatabaseError,
)
from services.lookup import fetch_by_ids

logger = structlog.get_logger(__name__)


class UserService:
    """
    User business logic.

    Handles CRUD operations and deactivation.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "users"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self, active_only: bool = False) -> list[UserResponse]:
        """
        Get users ordered by name.

        Args:
            active_only: Skip deactivated users
        """
        logger.debug("getting_users", active_only=active_only)

        try:
            query = self.db.table(self.table).select("*")
            if active_only:
                query = query.eq("is_active", True)

            rows = query.order("name").execute().data or []
            locations = self._lookup_locations(rows)

        except Exception as e:
            logger.error("get_users_failed", error=str(e))
            raise DatabaseError("select", str(e))

        return [self._row_to_user(row, locations) for row in rows]

    def get_by_id(self, user_id: int) -> UserResponse:
        """
        Get a single user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        logger.debug("getting_user", user_id=user_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                raise UserNotFoundError(user_id)

            row = result.data[0]
            locations = self._lookup_locations([row])

        except UserNotFoundError:
            raise
        except Exception as e:
            logger.error("get_user_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

        return self._row_to_user(row, locations)

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: UserCreate) -> UserResponse:
        """
        Create a new user.

        Raises:
            UserEmailExistsError: If the email is taken
            LocationNotFoundError: If location_id doesn't exist
        """
        logger.info("creating_user", email=data.email, role=data.role.value)

        try:
            self._check_email_free(data.email)
            self._check_location(data.location_id)

            result = (
                self.db.table(self.table)
                .insert(data.model_dump(mode="json"))
                .execute()
            )

            if not result.data:
                raise DatabaseError("insert", "No data returned")

            row = result.data[0]
            locations = self._lookup_locations([row])

        except (UserEmailExistsError, LocationNotFoundError, DatabaseError):
            raise
        except Exception as e:
            logger.error("create_user_failed", email=data.email, error=str(e))
            raise DatabaseError("insert", str(e))

        logger.info("user_created", user_id=row["id"])
        return self._row_to_user(row, locations)

    def update(self, user_id: int, data: UserUpdate) -> UserResponse:
        """
        Update an existing user.

        Only provided fields are updated.

        Raises:
            UserNotFoundError: If user doesn't exist
            UserEmailExistsError: If the new email belongs to someone else
            LocationNotFoundError: If the new location_id doesn't exist
        """
        logger.info("updating_user", user_id=user_id)

        existing = self.get_by_id(user_id)

        update_data = data.model_dump(exclude_unset=True, mode="json")
        if not update_data:
            return existing

        try:
            if "email" in update_data and update_data["email"] != existing.email:
                self._check_email_free(update_data["email"], exclude_id=user_id)
            if update_data.get("location_id") is not None:
                self._check_location(update_data["location_id"])

            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", user_id)
                .execute()
            )

            if not result.data:
                raise UserNotFoundError(user_id)

            row = result.data[0]
            locations = self._lookup_locations([row])

        except (UserNotFoundError, UserEmailExistsError, LocationNotFoundError):
            raise
        except Exception as e:
            logger.error("update_user_failed", user_id=user_id, error=str(e))
            raise DatabaseError("update", str(e))

        logger.info("user_updated", user_id=user_id, fields=list(update_data.keys()))
        return self._row_to_user(row, locations)

    def deactivate(self, user_id: int) -> UserResponse:
        """
        Deactivate a user (soft delete).

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        logger.info("deactivating_user", user_id=user_id)
        return self.update(user_id, UserUpdate(is_active=False))

    # ===================
    # HELPERS
    # ===================

    def _check_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.table(self.table).select("id").eq("email", email)
        if exclude_id is not None:
            query = query.neq("id", exclude_id)
        if query.limit(1).execute().data:
            raise UserEmailExistsError(email)

    def _check_location(self, location_id: Optional[int]) -> None:
        if location_id is None:
            return
        if not fetch_by_ids(self.db, "locations", [location_id], "id"):
            raise LocationNotFoundError(location_id)

    def _lookup_locations(self, rows: list[dict]) -> dict:
        return fetch_by_ids(
            self.db, "locations", (r.get("location_id") for r in rows), "id, location_name"
        )

    def _row_to_user(self, row: dict, locations: dict) -> UserResponse:
        location = locations.get(row.get("location_id"), {})
        return UserResponse(**row, location_name=location.get("location_name"))


# Singleton instance
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    """Get or create UserService instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
