"""
Repository for player profiles and stored player recommendations.
"""

from collections.abc import Iterable

from courtmate.db.helpers import execute_transaction, fetch_all, fetch_one, with_db_retry
from courtmate.infrastructure.observability.logging import get_logger

from .compatibility import PlayerRecommendation

logger = get_logger(__name__)

PROFILE_COLUMNS = "id, full_name, location, age, current_rating, playing_style"


class RecommendationRepository:
    @staticmethod
    @with_db_retry()
    async def fetch_profile(user_id: str) -> dict | None:
        query = f"SELECT {PROFILE_COLUMNS} FROM user_profiles WHERE id = %s"
        return await fetch_one(query, (user_id,))

    @staticmethod
    @with_db_retry()
    async def fetch_active_profiles(exclude_user_id: str) -> list[dict]:
        query = f"""
            SELECT {PROFILE_COLUMNS}
            FROM user_profiles
            WHERE id <> %s
              AND is_active = true
        """
        return await fetch_all(query, (exclude_user_id,))

    @staticmethod
    @with_db_retry()
    async def fetch_recommendations(user_id: str, limit: int = 10) -> list[dict]:
        """Non-expired recommendations for a user, best score first."""
        query = """
            SELECT recommended_player_id, recommendation_score, factors_matched, reasoning
            FROM player_recommendations
            WHERE user_id = %s
              AND expires_at > NOW()
            ORDER BY recommendation_score DESC
            LIMIT %s
        """
        return await fetch_all(query, (user_id, limit))

    @staticmethod
    async def replace_recommendations(
        user_id: str, recommendations: Iterable[PlayerRecommendation]
    ) -> int:
        """Swap a user's stored recommendations for a fresh set in one transaction."""
        rows = [rec.to_row() for rec in recommendations]

        insert = """
            INSERT INTO player_recommendations
                (user_id, recommended_player_id, recommendation_score,
                 reasoning, factors_matched, expires_at)
            VALUES (%s, %s, %s, %s, %s, %s)
        """
        queries = [("DELETE FROM player_recommendations WHERE user_id = %s", (user_id,))]
        queries.extend(
            (
                insert,
                (
                    row["user_id"],
                    row["recommended_player_id"],
                    row["recommendation_score"],
                    row["reasoning"],
                    row["factors_matched"],
                    row["expires_at"],
                ),
            )
            for row in rows
        )

        await execute_transaction(queries)
        logger.info("Player recommendations replaced", user_id=user_id, count=len(rows))
        return len(rows)
