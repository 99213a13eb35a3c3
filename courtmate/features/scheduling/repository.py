"""
Repository for recurring player availability (user_availability table).
"""

from courtmate.db.helpers import fetch_all, with_db_retry
from courtmate.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class AvailabilityRepository:
    """Thin wrappers around the user_availability rows written by the app."""

    @staticmethod
    @with_db_retry()
    async def fetch_availability(user_id: str) -> list[dict]:
        query = """
            SELECT id, user_id, day_of_week, start_time, end_time, is_preferred
            FROM user_availability
            WHERE user_id = %s
            ORDER BY day_of_week, start_time
        """
        rows = await fetch_all(query, (user_id,))
        logger.debug("Fetched availability", user_id=user_id, row_count=len(rows))
        return rows
