"""
Location service for warehouse/store master data.
"""

from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.location import LocationCreate, LocationUpdate, LocationResponse
from exceptions import LocationNotFoundError, InUseError, ValidationError, DatabaseError
from services.lookup import referencing_tables

logger = structlog.get_logger(__name__)

REFERENCING_TABLES = (
    "box_stock", "pair_stock", "box_conversions", "goods_receipts", "users", "sales_orders",
)


class LocationService:
    """
    Location business logic.

    Handles CRUD operations for warehouses and stores.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "locations"

    def get_all(self) -> list[LocationResponse]:
        """Get all locations (small table, no pagination)."""
        logger.debug("getting_locations")

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("id")
                .execute()
            )
            return [LocationResponse(**row) for row in result.data]

        except Exception as e:
            logger.error("get_locations_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, location_id: int) -> LocationResponse:
        """
        Get a single location by ID.

        Raises:
            LocationNotFoundError: If location doesn't exist
        """
        logger.debug("getting_location", location_id=location_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", location_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                raise LocationNotFoundError(location_id)

            return LocationResponse(**result.data[0])

        except LocationNotFoundError:
            raise
        except Exception as e:
            logger.error("get_location_failed", location_id=location_id, error=str(e))
            raise DatabaseError("select", str(e))

    def create(self, data: LocationCreate) -> LocationResponse:
        """Create a new location."""
        logger.info(
            "creating_location",
            location_name=data.location_name,
            location_type=data.location_type.value
        )

        try:
            result = (
                self.db.table(self.table)
                .insert({
                    "location_name": data.location_name,
                    "location_type": data.location_type.value,
                    "address": data.address,
                })
                .execute()
            )

            if not result.data:
                raise DatabaseError("insert", "No data returned")

            logger.info("location_created", location_id=result.data[0]["id"])
            return LocationResponse(**result.data[0])

        except DatabaseError:
            raise
        except Exception as e:
            logger.error("create_location_failed", error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, location_id: int, data: LocationUpdate) -> LocationResponse:
        """
        Update an existing location.

        Only provided fields are updated.

        Raises:
            LocationNotFoundError: If location doesn't exist
        """
        logger.info("updating_location", location_id=location_id)

        existing = self.get_by_id(location_id)

        update_data = data.model_dump(exclude_unset=True, mode="json")
        if not update_data:
            return existing

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", location_id)
                .execute()
            )

            if not result.data:
                raise LocationNotFoundError(location_id)

            logger.info(
                "location_updated",
                location_id=location_id,
                fields=list(update_data.keys())
            )
            return LocationResponse(**result.data[0])

        except LocationNotFoundError:
            raise
        except Exception as e:
            logger.error("update_location_failed", location_id=location_id, error=str(e))
            raise DatabaseError("update", str(e))

    def delete(self, location_id: int) -> bool:
        """
        Delete a location.

        The configured main warehouse and locations still referenced by
        stock, conversions, receipts, users or sales cannot be deleted.

        Raises:
            LocationNotFoundError: If location doesn't exist
            ValidationError: If it is the main warehouse
            InUseError: If the location is still referenced
        """
        logger.info("deleting_location", location_id=location_id)

        if location_id == settings.main_warehouse_id:
            raise ValidationError(
                code="MAIN_WAREHOUSE_DELETE",
                message="The main warehouse cannot be deleted",
                details={"id": location_id}
            )

        self.get_by_id(location_id)

        try:
            used_by = referencing_tables(self.db, "location_id", location_id, REFERENCING_TABLES)
            if used_by:
                raise InUseError("Location", location_id, used_by)

            self.db.table(self.table).delete().eq("id", location_id).execute()
            logger.info("location_deleted", location_id=location_id)
            return True

        except InUseError:
            logger.warning("delete_location_refused", location_id=location_id)
            raise
        except Exception as e:
            logger.error("delete_location_failed", location_id=location_id, error=str(e))
            raise DatabaseError("delete", str(e))


# Singleton instance
_location_service: Optional[LocationService] = None


def get_location_service() -> LocationService:
    """Get or create LocationService instance."""
    global _location_service
    if _location_service is None:
        _location_service = LocationService()
    return _location_service
