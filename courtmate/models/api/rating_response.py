# courtmate/models/api/rating_response.py
"""
Rating and recommendation API response models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class RatingConversionResponse(BaseModel):
    utr: float = Field(..., description="UTR rating supplied")
    ntrp: float = Field(..., description="NTRP rating on the half-point grid")
    ntrp_unrounded: float = Field(..., description="NTRP before rounding")


class RecommendationResponse(BaseModel):
    recommended_player_id: str = Field(..., description="Recommended player")
    recommendation_score: float = Field(..., ge=0.0, le=1.0, description="Compatibility 0-1")
    reasoning: str = Field(..., description="Why the players match")
    factors_matched: list[str] = Field(..., description="Matched factors")
    expires_at: datetime = Field(..., description="When the recommendation expires")


class GenerateRecommendationsResponse(BaseModel):
    success: bool = Field(..., description="Whether generation succeeded")
    recommendations_count: int = Field(..., description="Number of stored recommendations")
    recommendations: list[RecommendationResponse] = Field(..., description="Stored recommendations")
