"""
Confidence scoring and ranking of candidate slot / opponent pairings.
"""

from __future__ import annotations

from collections.abc import Iterable

from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.features.scheduling.domain.models import (
    RankingCandidate,
    ScoringWeights,
    Suggestion,
    day_of_week,
    is_weekend,
)

DEFAULT_WEIGHTS = ScoringWeights()

HIGH_COMPATIBILITY = 0.8
COMPATIBLE = 0.5
HIGH_CONFIDENCE = 0.8
FALLBACK_REASON = "Good mutual availability"


def is_optimal_time(hour: int, weekend: bool, weights: ScoringWeights = DEFAULT_WEIGHTS) -> bool:
    """Weekend mornings and weekday evenings, both bands inclusive."""
    low, high = weights.weekend_hours if weekend else weights.weekday_hours
    return low <= hour <= high


def score(
    candidate: RankingCandidate, weights: ScoringWeights = DEFAULT_WEIGHTS
) -> tuple[float, str]:
    """Return (confidence, reason) for one pairing."""
    slot = candidate.slot
    weekend = is_weekend(day_of_week(slot.start))
    confidence = weights.base
    reasons: list[str] = []

    if candidate.preference_a and candidate.preference_b:
        confidence += weights.both_preferred
        reasons.append("both players' preferred time")
    elif candidate.preference_a or candidate.preference_b:
        confidence += weights.one_preferred
        reasons.append("one player's preferred time")

    compatibility = candidate.compatibility
    if compatibility is not None:
        compat_score = min(max(compatibility.score, 0.0), 1.0)
        confidence += compat_score * weights.compatibility
        if compat_score >= HIGH_COMPATIBILITY:
            reasons.append("highly compatible player")
        elif compat_score >= COMPATIBLE:
            reasons.append("compatible player")

    if is_optimal_time(slot.start.hour, weekend, weights):
        confidence += weights.optimal_time
        reasons.append("optimal weekend morning slot" if weekend else "popular evening time")

    if weekend:
        confidence += weights.weekend
        reasons.append("weekend availability")

    confidence = round(min(max(confidence, 0.0), 1.0), 4)

    if confidence > HIGH_CONFIDENCE:
        reasons.append("high success probability")

    reason = f"Great time because: {', '.join(reasons)}" if reasons else FALLBACK_REASON
    return confidence, reason


def rank(
    candidates: Iterable[RankingCandidate],
    max_results: int,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[Suggestion]:
    """
    Score every candidate and return the best max_results suggestions.

    Ordered by confidence descending, then earliest start; opponent id
    breaks any remaining tie so the output is fully deterministic.
    """
    if max_results < 0:
        raise InvalidParameterError(
            f"max_results must not be negative, got {max_results}", parameter="max_results"
        )

    suggestions = []
    for candidate in candidates:
        confidence, reason = score(candidate, weights)
        suggestions.append(
            Suggestion(
                opponent_id=candidate.opponent_id,
                datetime=candidate.slot.start,
                end=candidate.slot.end,
                confidence=confidence,
                reason=reason,
                day_of_week=day_of_week(candidate.slot.start),
            )
        )

    suggestions.sort(key=lambda s: (-s.confidence, s.datetime, s.opponent_id))
    return suggestions[:max_results]
