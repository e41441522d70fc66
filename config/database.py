"""
Supabase client for the warehouse tables.

One client per process; services fetch it through get_supabase_client()
so tests can patch it per module.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions.errors import DatabaseError

logger = structlog.get_logger(__name__)


class ConnectionError(DatabaseError):
    """Supabase client could not be created (503)."""

    def __init__(self, message: str):
        super().__init__("connect", message)
        self.code = "DATABASE_CONNECTION_ERROR"
        self.status_code = 503


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get the cached Supabase client.

    Raises:
        ConnectionError: If the client cannot be created
    """
    # Partial URL only, the project ref is enough to tell environments apart
    logger.info("connecting_to_supabase", url=settings.supabase_url[:30] + "...")

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error("supabase_connection_failed", error=str(e), error_type=type(e).__name__)
        raise ConnectionError(f"Failed to connect to Supabase: {e}") from e

    logger.info("supabase_connected")
    return client


def check_connection() -> dict:
    """
    Probe the store for the health endpoint.

    Counts locations and conversion items that still have boxes waiting,
    which also proves both tables are reachable.

    Returns:
        dict with status "healthy" and counts, or "unhealthy" and the error
    """
    try:
        client = get_supabase_client()

        locations = client.table("locations").select("id", count="exact").execute()
        open_items = (
            client.table("box_conversions")
            .select("id", count="exact")
            .gt("ready_box_count", 0)
            .execute()
        )

        return {
            "status": "healthy",
            "locations_count": locations.count,
            "open_conversions_count": open_items.count
        }

    except Exception as e:
        logger.warning("database_health_check_failed", error=str(e))
        return {
            "status": "unhealthy",
            "error": str(e)
        }
