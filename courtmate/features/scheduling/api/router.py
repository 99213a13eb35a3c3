"""
Smart scheduling routes.

HTTP endpoints for mutual availability and ranked match suggestions. The
routes only translate between API models and the service; all scheduling
logic lives in the engine.
"""

from datetime import tzinfo
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status

from courtmate.auth.verify import current_user_id
from courtmate.config import settings
from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.features.scheduling.domain.models import (
    BusyEvent,
    CandidateSlot,
    DayWindow,
    ScoringWeights,
    Suggestion,
    day_of_week,
    is_weekend,
)
from courtmate.features.scheduling.engine.confidence_ranker import is_optimal_time
from courtmate.features.scheduling.service import SmartSchedulingService
from courtmate.infrastructure.observability.logging import get_logger
from courtmate.models.api.scheduling_request import (
    BusyEventRequest,
    MutualAvailabilityRequest,
    SuggestionsRequest,
)
from courtmate.models.api.scheduling_response import (
    CandidateSlotResponse,
    MutualAvailabilityResponse,
    SuggestionResponse,
    SuggestionsResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@lru_cache
def get_scheduling_service() -> SmartSchedulingService:
    return SmartSchedulingService(settings.scheduling_config())


def _to_busy_events(events: list[BusyEventRequest]) -> list[BusyEvent]:
    return [BusyEvent(start=e.start, end=e.end, summary=e.summary) for e in events]


def _requester_busy(
    busy_events: list[BusyEventRequest], calendar_events: list[dict], tz: tzinfo
) -> list[BusyEvent]:
    """Explicit busy events plus the blocking ones from raw Google Calendar payloads."""
    busy = _to_busy_events(busy_events)
    for raw_event in calendar_events:
        event = BusyEvent.from_google_event(raw_event, tz)
        if event is not None:
            busy.append(event)
    return busy


def _confidence_label(confidence: float) -> str:
    if confidence >= 0.8:
        return "High Match"
    if confidence >= 0.6:
        return "Good Match"
    return "Fair Match"


def _slot_response(slot: CandidateSlot, weights: ScoringWeights) -> CandidateSlotResponse:
    weekend = is_weekend(day_of_week(slot.start))
    return CandidateSlotResponse(
        start=slot.start,
        end=slot.end,
        duration_minutes=slot.duration_minutes,
        available=slot.available,
        day_of_week=slot.day_of_week,
        ai_recommended=is_optimal_time(slot.start.hour, weekend, weights),
    )


def _suggestion_response(suggestion: Suggestion) -> SuggestionResponse:
    return SuggestionResponse(
        opponent_id=suggestion.opponent_id,
        datetime=suggestion.datetime,
        end=suggestion.end,
        confidence=suggestion.confidence,
        confidence_label=_confidence_label(suggestion.confidence),
        reason=suggestion.reason,
        day_of_week=suggestion.day_of_week,
    )


@router.post("/mutual-availability", response_model=MutualAvailabilityResponse)
async def mutual_availability(
    request: MutualAvailabilityRequest,
    user_id: str = Depends(current_user_id),
    service: SmartSchedulingService = Depends(get_scheduling_service),
):
    """Candidate slots on one date where both players are free."""
    busy = _requester_busy(request.busy_events, request.calendar_events, service.tz)

    day_window = None
    if request.day_window:
        day_window = DayWindow(
            start_hour=request.day_window.start_hour, end_hour=request.day_window.end_hour
        )

    try:
        slots = await service.find_mutual_availability(
            user_id,
            request.opponent_id,
            request.date,
            busy=busy,
            opponent_busy=_to_busy_events(request.opponent_busy_events),
            slot_duration_minutes=request.slot_duration_minutes,
            step_minutes=request.step_minutes,
            day_window=day_window,
        )
    except InvalidParameterError as e:
        logger.warning("Invalid mutual availability request", user_id=user_id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error finding mutual availability", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to find mutual availability",
        )

    slot_responses = [_slot_response(slot, service.config.weights) for slot in slots]
    return MutualAvailabilityResponse(
        opponent_id=request.opponent_id,
        date=request.date,
        slots=slot_responses,
        total_count=len(slot_responses),
        available_count=sum(1 for s in slot_responses if s.available),
    )


@router.post("/suggestions", response_model=SuggestionsResponse)
async def match_suggestions(
    request: SuggestionsRequest,
    user_id: str = Depends(current_user_id),
    service: SmartSchedulingService = Depends(get_scheduling_service),
):
    """Ranked suggestions of when and with whom to play."""
    try:
        suggestions = await service.suggest_matches(
            user_id,
            opponent_ids=request.opponent_ids,
            from_date=request.from_date,
            days_ahead=request.days_ahead,
            max_results=request.max_results,
            busy=_requester_busy(request.busy_events, request.calendar_events, service.tz),
            opponent_busy={
                opponent_id: _to_busy_events(events)
                for opponent_id, events in request.opponent_busy_events.items()
            },
        )
    except InvalidParameterError as e:
        logger.warning("Invalid suggestions request", user_id=user_id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error generating suggestions", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate suggestions",
        )

    return SuggestionsResponse(
        suggestions=[_suggestion_response(s) for s in suggestions],
        total_suggestions=len(suggestions),
    )
