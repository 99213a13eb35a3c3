"""
Smart scheduling service - loads both players' inputs, runs the engine and ranks results.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from courtmate.features.recommendations.repository import RecommendationRepository
from courtmate.infrastructure.observability.logging import get_logger

from .domain.errors import InvalidParameterError, ValidationError
from .domain.models import (
    AvailabilitySlot,
    BusyEvent,
    CandidateSlot,
    Compatibility,
    DayWindow,
    RankingCandidate,
    SchedulingConfig,
    Suggestion,
    ensure_aware,
)
from .engine import AvailabilityIndex, index_by_day, intersect, intersect_range, rank
from .repository import AvailabilityRepository

logger = get_logger(__name__)


def compatibility_from_row(row: dict) -> Compatibility | None:
    """Stored recommendation row -> Compatibility; percent scores are scaled down."""
    raw_score = row.get("recommendation_score")
    if raw_score is None:
        return None
    score = float(raw_score)
    if score > 1.0:
        score /= 100.0
    return Compatibility(
        score=min(max(score, 0.0), 1.0),
        factors=tuple(row.get("factors_matched") or ()),
        reasoning=row.get("reasoning"),
    )


class SmartSchedulingService:
    def __init__(
        self,
        config: SchedulingConfig,
        availability_repository=AvailabilityRepository,
        recommendation_repository=RecommendationRepository,
    ):
        self.config = config
        self.tz = ZoneInfo(config.timezone)
        self.availability_repository = availability_repository
        self.recommendation_repository = recommendation_repository

    async def load_index(self, user_id: str) -> AvailabilityIndex:
        """Fetch a player's availability rows and index them; bad rows are skipped."""
        rows = await self.availability_repository.fetch_availability(user_id)

        slots: list[AvailabilitySlot] = []
        for row in rows:
            try:
                slots.append(AvailabilitySlot.from_row(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed availability row",
                    user_id=user_id,
                    row_id=row.get("id"),
                    error=str(e),
                )

        return index_by_day(slots)

    async def find_mutual_availability(
        self,
        user_id: str,
        opponent_id: str,
        target_date: date,
        busy: Iterable[BusyEvent] | None = None,
        opponent_busy: Iterable[BusyEvent] | None = None,
        slot_duration_minutes: int | None = None,
        step_minutes: int | None = None,
        day_window: DayWindow | None = None,
    ) -> list[CandidateSlot]:
        """Candidate slots on one date using each player's own availability and busy time."""
        user_index, opponent_index = await asyncio.gather(
            self.load_index(user_id), self.load_index(opponent_id)
        )

        candidates = intersect(
            user_index,
            opponent_index,
            target_date,
            slot_duration_minutes=(
                self.config.slot_duration_minutes
                if slot_duration_minutes is None
                else slot_duration_minutes
            ),
            step_minutes=self.config.step_minutes if step_minutes is None else step_minutes,
            day_window=day_window or self.config.day_window,
            busy_a=busy,
            busy_b=opponent_busy,
            tz=self.tz,
        )

        logger.info(
            "Mutual availability computed",
            user_id=user_id,
            opponent_id=opponent_id,
            date=target_date.isoformat(),
            candidates=len(candidates),
            available=sum(1 for c in candidates if c.available),
        )
        return candidates

    async def suggest_matches(
        self,
        user_id: str,
        opponent_ids: Sequence[str] | None = None,
        from_date: date | None = None,
        days_ahead: int | None = None,
        max_results: int | None = None,
        busy: Iterable[BusyEvent] | None = None,
        opponent_busy: Mapping[str, Iterable[BusyEvent]] | None = None,
        now: datetime | None = None,
    ) -> list[Suggestion]:
        """
        Ranked match suggestions for a user.

        Args:
            user_id: Player asking for suggestions
            opponent_ids: Opponents to consider; defaults to the user's stored recommendations
            from_date: First date to search (default: today in the scheduling timezone)
            days_ahead: Number of days to search, including from_date
            max_results: Cap on returned suggestions
            busy: The user's busy events
            opponent_busy: Busy events per opponent id
            now: Slots starting at or before this instant are dropped

        Returns:
            Suggestions sorted by confidence descending, earliest first on ties
        """
        days_ahead = self.config.days_ahead if days_ahead is None else days_ahead
        max_results = self.config.max_suggestions if max_results is None else max_results
        if days_ahead < 1:
            raise InvalidParameterError(
                f"days_ahead must be at least 1, got {days_ahead}", parameter="days_ahead"
            )

        now = ensure_aware(now, self.tz) if now else datetime.now(self.tz)
        from_date = from_date or now.astimezone(self.tz).date()
        to_date = from_date + timedelta(days=days_ahead - 1)

        recommendation_rows = await self.recommendation_repository.fetch_recommendations(
            user_id, max(max_results, 10)
        )
        compatibility_by_opponent = {
            str(row["recommended_player_id"]): compatibility_from_row(row)
            for row in recommendation_rows
        }

        if opponent_ids is None:
            opponent_ids = list(compatibility_by_opponent)
        opponent_ids = [oid for oid in dict.fromkeys(opponent_ids) if oid != user_id]
        if not opponent_ids:
            logger.info("No opponents to schedule with", user_id=user_id)
            return []

        user_index = await self.load_index(user_id)
        if user_index.is_empty():
            logger.info("User has no availability", user_id=user_id)
            return []

        opponent_indexes = await asyncio.gather(*(self.load_index(oid) for oid in opponent_ids))
        busy = list(busy or ())
        opponent_busy = opponent_busy or {}

        candidates: list[RankingCandidate] = []
        for opponent_id, opponent_index in zip(opponent_ids, opponent_indexes):
            slots = intersect_range(
                user_index,
                opponent_index,
                from_date,
                to_date,
                slot_duration_minutes=self.config.slot_duration_minutes,
                step_minutes=self.config.step_minutes,
                day_window=self.config.day_window,
                busy_a=busy,
                busy_b=opponent_busy.get(opponent_id),
                tz=self.tz,
            )
            compatibility = compatibility_by_opponent.get(opponent_id)
            candidates.extend(
                RankingCandidate(
                    slot=slot,
                    opponent_id=opponent_id,
                    preference_a=slot.preferred_by_a,
                    preference_b=slot.preferred_by_b,
                    compatibility=compatibility,
                )
                for slot in slots
                if slot.available and slot.start > now
            )

        suggestions = rank(candidates, max_results, self.config.weights)

        logger.info(
            "Match suggestions generated",
            user_id=user_id,
            opponents=len(opponent_ids),
            candidates=len(candidates),
            returned=len(suggestions),
            from_date=from_date.isoformat(),
            to_date=to_date.isoformat(),
        )
        return suggestions
