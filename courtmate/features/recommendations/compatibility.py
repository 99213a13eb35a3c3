"""
Player compatibility scoring.

Scores how well two player profiles fit along four factors (location, age,
skill level and playing style). The resulting score is the optional
compatibility input of the scheduling ranker.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from courtmate.features.scheduling.domain.models import Compatibility

LOCATION_WEIGHT = 0.3
CLOSE_AGE_WEIGHT = 0.2
NEAR_AGE_WEIGHT = 0.1
SKILL_WEIGHTS = ((0.5, 0.3), (1.0, 0.2), (1.5, 0.1))
SAME_STYLE_WEIGHT = 0.2
COMPLEMENTARY_STYLE_WEIGHT = 0.15
COMPLEMENTARY_STYLES = {frozenset({"aggressive", "defensive"})}

FACTOR_REASONS = {
    "location": "you're in the same area",
    "age": "you're similar in age",
    "skill_level": "you have similar skill levels",
    "playing_style": "your playing styles complement each other",
}


@dataclass(slots=True)
class PlayerProfile:
    id: str
    full_name: str | None = None
    location: str | None = None
    age: int | None = None
    current_rating: float | None = None
    playing_style: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> PlayerProfile:
        rating = row.get("current_rating")
        return cls(
            id=str(row["id"]),
            full_name=row.get("full_name"),
            location=row.get("location"),
            age=row.get("age"),
            current_rating=float(rating) if rating is not None else None,
            playing_style=row.get("playing_style"),
        )


@dataclass(slots=True)
class PlayerRecommendation:
    user_id: str
    recommended_player_id: str
    recommendation_score: float
    reasoning: str
    factors_matched: list[str]
    expires_at: datetime

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "recommended_player_id": self.recommended_player_id,
            "recommendation_score": self.recommendation_score,
            "reasoning": self.reasoning,
            "factors_matched": self.factors_matched,
            "expires_at": self.expires_at,
        }


def _locations_match(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    a, b = a.lower(), b.lower()
    return a in b or b in a


def _age_points(a: int | None, b: int | None) -> float:
    if a is None or b is None:
        return 0.0
    diff = abs(a - b)
    if diff <= 5:
        return CLOSE_AGE_WEIGHT
    if diff <= 10:
        return NEAR_AGE_WEIGHT
    return 0.0


def _skill_points(a: float | None, b: float | None) -> float:
    if a is None or b is None:
        return 0.0
    diff = abs(a - b)
    for max_diff, points in SKILL_WEIGHTS:
        if diff <= max_diff:
            return points
    return 0.0


def _style_points(a: str | None, b: str | None) -> float:
    if not a or not b:
        return 0.0
    if a == b:
        return SAME_STYLE_WEIGHT
    if frozenset({a, b}) in COMPLEMENTARY_STYLES:
        return COMPLEMENTARY_STYLE_WEIGHT
    return 0.0


def build_reasoning(name: str | None, factors: Iterable[str]) -> str:
    reasons = [FACTOR_REASONS[f] for f in factors if f in FACTOR_REASONS]
    subject = name or "This player"
    if not reasons:
        return f"{subject} is available to play."
    return f"{subject} is a great match because {', '.join(reasons)}."


def _raw_score(current: PlayerProfile, other: PlayerProfile) -> tuple[float, list[str]]:
    """Unrounded factor sum and the matched factor names."""
    score = 0.0
    factors: list[str] = []

    if _locations_match(current.location, other.location):
        score += LOCATION_WEIGHT
        factors.append("location")

    points = _age_points(current.age, other.age)
    if points:
        score += points
        factors.append("age")

    points = _skill_points(current.current_rating, other.current_rating)
    if points:
        score += points
        factors.append("skill_level")

    points = _style_points(current.playing_style, other.playing_style)
    if points:
        score += points
        factors.append("playing_style")

    return score, factors


def _compatibility(other: PlayerProfile, raw_score: float, factors: list[str]) -> Compatibility:
    return Compatibility(
        score=round(min(raw_score, 1.0), 4),
        factors=tuple(factors),
        reasoning=build_reasoning(other.full_name, factors),
    )


def score_compatibility(current: PlayerProfile, other: PlayerProfile) -> Compatibility:
    return _compatibility(other, *_raw_score(current, other))


def recommend_players(
    current: PlayerProfile,
    others: Iterable[PlayerProfile],
    min_score: float = 0.3,
    limit: int = 10,
    ttl_days: int = 7,
    now: datetime | None = None,
) -> list[PlayerRecommendation]:
    """
    Top compatible players scoring strictly above min_score, best first.

    The threshold applies to the unrounded factor sum, so 0.1 + 0.2 clears a
    0.3 threshold even though the stored score reads 0.3.
    """
    now = now or datetime.now(UTC)
    expires_at = now + timedelta(days=ttl_days)

    scored = []
    for other in others:
        if other.id == current.id:
            continue
        raw_score, factors = _raw_score(current, other)
        if raw_score > min_score:
            scored.append((other, _compatibility(other, raw_score, factors)))

    scored.sort(key=lambda pair: (-pair[1].score, pair[0].id))

    return [
        PlayerRecommendation(
            user_id=current.id,
            recommended_player_id=other.id,
            recommendation_score=compatibility.score,
            reasoning=compatibility.reasoning or "",
            factors_matched=list(compatibility.factors),
            expires_at=expires_at,
        )
        for other, compatibility in scored[:limit]
    ]
