# courtmate/models/api/scheduling_response.py
"""
Scheduling API response models.
Used by routes for output formatting.
"""

import datetime as dt

from pydantic import BaseModel, Field


class CandidateSlotResponse(BaseModel):
    start: dt.datetime = Field(..., description="Slot start")
    end: dt.datetime = Field(..., description="Slot end")
    duration_minutes: int = Field(..., description="Slot length in minutes")
    available: bool = Field(..., description="False when either player is busy")
    day_of_week: int = Field(..., description="0 = Sunday")
    ai_recommended: bool = Field(
        default=False, description="Weekend morning or weekday evening slot"
    )


class MutualAvailabilityResponse(BaseModel):
    opponent_id: str = Field(..., description="Opponent user ID")
    date: dt.date = Field(..., description="Date checked")
    slots: list[CandidateSlotResponse] = Field(..., description="Candidate slots in time order")
    total_count: int = Field(..., description="Number of candidate slots")
    available_count: int = Field(..., description="Number of available slots")


class SuggestionResponse(BaseModel):
    opponent_id: str = Field(..., description="Suggested opponent")
    datetime: dt.datetime = Field(..., description="Suggested start")
    end: dt.datetime = Field(..., description="Suggested end")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence 0-1")
    confidence_label: str = Field(..., description="High / Good / Fair Match")
    reason: str = Field(..., description="Why this slot was suggested")
    day_of_week: int = Field(..., description="0 = Sunday")


class SuggestionsResponse(BaseModel):
    suggestions: list[SuggestionResponse] = Field(..., description="Ranked suggestions")
    total_suggestions: int = Field(..., description="Number of suggestions returned")
