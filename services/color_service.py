"""
Color service for master-data CRUD.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.color import ColorCreate, ColorUpdate, ColorResponse
from exceptions import ColorNotFoundError, InUseError, DatabaseError
from services.lookup import referencing_tables

logger = structlog.get_logger(__name__)

REFERENCING_TABLES = ("box_stock", "pair_stock", "box_conversions", "goods_receipts")


class ColorService:
    """
    Color business logic.

    Handles CRUD operations for colors.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "colors"

    def get_all(self) -> list[ColorResponse]:
        """Get all colors ordered by name."""
        logger.debug("getting_colors")

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("color_name")
                .execute()
            )
            return [ColorResponse(**row) for row in result.data]

        except Exception as e:
            logger.error("get_colors_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, color_id: int) -> ColorResponse:
        """
        Get a single color by ID.

        Raises:
            ColorNotFoundError: If color doesn't exist
        """
        logger.debug("getting_color", color_id=color_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", color_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                raise ColorNotFoundError(color_id)

            return ColorResponse(**result.data[0])

        except ColorNotFoundError:
            raise
        except Exception as e:
            logger.error("get_color_failed", color_id=color_id, error=str(e))
            raise DatabaseError("select", str(e))

    def create(self, data: ColorCreate) -> ColorResponse:
        """Create a new color."""
        logger.info("creating_color", color_name=data.color_name)

        try:
            result = (
                self.db.table(self.table)
                .insert({"color_name": data.color_name})
                .execute()
            )

            if not result.data:
                raise DatabaseError("insert", "No data returned")

            logger.info("color_created", color_id=result.data[0]["id"])
            return ColorResponse(**result.data[0])

        except DatabaseError:
            raise
        except Exception as e:
            logger.error("create_color_failed", color_name=data.color_name, error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, color_id: int, data: ColorUpdate) -> ColorResponse:
        """
        Rename a color.

        Raises:
            ColorNotFoundError: If color doesn't exist
        """
        logger.info("updating_color", color_id=color_id)

        # Verify exists
        self.get_by_id(color_id)

        try:
            result = (
                self.db.table(self.table)
                .update({"color_name": data.color_name})
                .eq("id", color_id)
                .execute()
            )

            if not result.data:
                raise ColorNotFoundError(color_id)

            logger.info("color_updated", color_id=color_id)
            return ColorResponse(**result.data[0])

        except ColorNotFoundError:
            raise
        except Exception as e:
            logger.error("update_color_failed", color_id=color_id, error=str(e))
            raise DatabaseError("update", str(e))

    def delete(self, color_id: int) -> bool:
        """
        Delete a color.

        Refused while stock or conversion rows still use the color.

        Raises:
            ColorNotFoundError: If color doesn't exist
            InUseError: If the color is still referenced
        """
        logger.info("deleting_color", color_id=color_id)

        self.get_by_id(color_id)

        try:
            used_by = referencing_tables(self.db, "color_id", color_id, REFERENCING_TABLES)
            if used_by:
                raise InUseError("Color", color_id, used_by)

            self.db.table(self.table).delete().eq("id", color_id).execute()
            logger.info("color_deleted", color_id=color_id)
            return True

        except InUseError:
            logger.warning("delete_color_refused", color_id=color_id)
            raise
        except Exception as e:
            logger.error("delete_color_failed", color_id=color_id, error=str(e))
            raise DatabaseError("delete", str(e))


# Singleton instance
_color_service: Optional[ColorService] = None


def get_color_service() -> ColorService:
    """Get or create ColorService instance."""
    global _color_service
    if _color_service is None:
        _color_service = ColorService()
    return _color_service
