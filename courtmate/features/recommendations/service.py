"""
Recommendation service - scores every active player against a user and stores the best.
"""

from courtmate.infrastructure.observability.logging import get_logger

from .compatibility import PlayerProfile, PlayerRecommendation, recommend_players
from .repository import RecommendationRepository

logger = get_logger(__name__)


class ProfileNotFoundError(Exception):
    """The requesting user has no profile row."""


class RecommendationService:
    def __init__(
        self,
        min_score: float = 0.3,
        limit: int = 10,
        ttl_days: int = 7,
        repository=RecommendationRepository,
    ):
        self.min_score = min_score
        self.limit = limit
        self.ttl_days = ttl_days
        self.repository = repository

    async def generate_for_user(self, user_id: str) -> list[PlayerRecommendation]:
        profile_row = await self.repository.fetch_profile(user_id)
        if not profile_row:
            raise ProfileNotFoundError(f"No profile for user {user_id}")

        current = PlayerProfile.from_row(profile_row)
        others = []
        for row in await self.repository.fetch_active_profiles(user_id):
            try:
                others.append(PlayerProfile.from_row(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed profile row", row_id=row.get("id"), error=str(e))

        recommendations = recommend_players(
            current,
            others,
            min_score=self.min_score,
            limit=self.limit,
            ttl_days=self.ttl_days,
        )
        await self.repository.replace_recommendations(user_id, recommendations)

        logger.info(
            "Recommendations generated",
            user_id=user_id,
            candidates=len(others),
            recommended=len(recommendations),
        )
        return recommendations
