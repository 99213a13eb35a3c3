"""
Domain subpackage for the smart scheduling feature.
"""

from .errors import InvalidParameterError, SchedulingError, ValidationError
from .models import (
    AvailabilitySlot,
    BusyEvent,
    CandidateSlot,
    Compatibility,
    DayWindow,
    RankingCandidate,
    SchedulingConfig,
    ScoringWeights,
    Suggestion,
)

__all__ = [
    "AvailabilitySlot",
    "BusyEvent",
    "CandidateSlot",
    "Compatibility",
    "DayWindow",
    "InvalidParameterError",
    "RankingCandidate",
    "SchedulingConfig",
    "SchedulingError",
    "ScoringWeights",
    "Suggestion",
    "ValidationError",
]
