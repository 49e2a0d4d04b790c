"""
Dashboard statistics.
"""
import logging

from chef_site.database import Database
from chef_site.schemas import StatsResponse

logger = logging.getLogger(__name__)

COUNTED_TABLES = {
    "categories": "categories",
    "menu_items": "menu_items",
    "gallery_images": "gallery_images",
    "users": "users",
    "bookings": "bookings",
}


class StatsService:
    def __init__(self, database: Database):
        self.database = database

    async def summary(self) -> StatsResponse:
        """
        Row counts for the dashboard.

        Each count is its own query; if any of them fails the whole summary
        fails and nothing partial is returned.

        Raises:
            StorageUnavailable: Database not configured
            StorageError: Any count query failed
        """
        counts = {}
        for key, table in COUNTED_TABLES.items():
            rows = await self.database.execute(f"SELECT COUNT(*) AS count FROM {table}")
            counts[key] = int(rows[0]["count"])

        logger.debug(f"Dashboard stats: {counts}")
        return StatsResponse(**counts)
