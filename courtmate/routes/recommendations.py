"""
Player recommendation routes.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status

from courtmate.auth.verify import current_user_id
from courtmate.config import settings
from courtmate.features.recommendations.service import ProfileNotFoundError, RecommendationService
from courtmate.infrastructure.observability.logging import get_logger
from courtmate.models.api.rating_response import (
    GenerateRecommendationsResponse,
    RecommendationResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@lru_cache
def get_recommendation_service() -> RecommendationService:
    return RecommendationService(
        min_score=settings.RECOMMENDATION_MIN_SCORE,
        limit=settings.RECOMMENDATION_LIMIT,
        ttl_days=settings.RECOMMENDATION_TTL_DAYS,
    )


@router.post("/generate", response_model=GenerateRecommendationsResponse)
async def generate_recommendations(
    user_id: str = Depends(current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Recompute and store the authenticated user's player recommendations."""
    try:
        recommendations = await service.generate_for_user(user_id)
    except ProfileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found")
    except Exception as e:
        logger.error("Error generating recommendations", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate recommendations",
        )

    return GenerateRecommendationsResponse(
        success=True,
        recommendations_count=len(recommendations),
        recommendations=[
            RecommendationResponse(
                recommended_player_id=rec.recommended_player_id,
                recommendation_score=rec.recommendation_score,
                reasoning=rec.reasoning,
                factors_matched=rec.factors_matched,
                expires_at=rec.expires_at,
            )
            for rec in recommendations
        ],
    )
