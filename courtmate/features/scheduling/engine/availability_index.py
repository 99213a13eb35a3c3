"""
Per-day index over a player's weekly recurring availability.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from courtmate.features.scheduling.domain.errors import ValidationError
from courtmate.features.scheduling.domain.models import AvailabilitySlot
from courtmate.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RejectedSlot:
    slot: AvailabilitySlot
    error: ValidationError


@dataclass(frozen=True, slots=True)
class AvailabilityIndex:
    days: Mapping[int, tuple[AvailabilitySlot, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    rejected: tuple[RejectedSlot, ...] = ()

    def for_day(self, day: int) -> tuple[AvailabilitySlot, ...]:
        return self.days.get(day, ())

    def is_empty(self) -> bool:
        return not self.days

    def __len__(self) -> int:
        return sum(len(slots) for slots in self.days.values())


def index_by_day(slots: Iterable[AvailabilitySlot]) -> AvailabilityIndex:
    """
    Group slots by day of week, each day ordered by (start_time, end_time).

    Malformed slots are skipped and reported on ``rejected``; one bad entry
    never prevents the rest from being indexed.
    """
    grouped: dict[int, list[AvailabilitySlot]] = {}
    rejected: list[RejectedSlot] = []

    for slot in slots:
        try:
            slot.validate()
        except ValidationError as e:
            rejected.append(RejectedSlot(slot=slot, error=e))
            continue
        grouped.setdefault(slot.day_of_week, []).append(slot)

    if rejected:
        logger.warning(
            "Skipped malformed availability slots",
            rejected_count=len(rejected),
            errors=[str(r.error) for r in rejected],
        )

    days = {
        day: tuple(sorted(day_slots, key=lambda s: (s.start_time, s.end_time, not s.is_preferred)))
        for day, day_slots in sorted(grouped.items())
    }
    return AvailabilityIndex(days=MappingProxyType(days), rejected=tuple(rejected))
