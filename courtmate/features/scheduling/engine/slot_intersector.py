"""
Mutual availability between two players.

For a given date, every recurring range of player A is intersected with
every range of player B on that day of week, clipped to the operating day
window, and the overlaps are cut into fixed-length candidate windows. A
window touching any busy event of either player is kept but marked
unavailable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.features.scheduling.domain.models import (
    BusyEvent,
    CandidateSlot,
    DayWindow,
    day_of_week,
)

from .availability_index import AvailabilityIndex

DEFAULT_DAY_WINDOW = DayWindow(start_hour=6, end_hour=22)


def _validate_parameters(
    slot_duration_minutes: int, step_minutes: int, day_window: DayWindow
) -> None:
    if slot_duration_minutes <= 0:
        raise InvalidParameterError(
            f"slot_duration_minutes must be positive, got {slot_duration_minutes}",
            parameter="slot_duration_minutes",
        )
    if step_minutes <= 0:
        raise InvalidParameterError(
            f"step_minutes must be positive, got {step_minutes}", parameter="step_minutes"
        )
    if not day_window.is_valid():
        raise InvalidParameterError(
            f"Invalid day window {day_window.start_hour}-{day_window.end_hour}",
            parameter="day_window",
        )


def overlapping_ranges(
    player_a: AvailabilityIndex, player_b: AvailabilityIndex, day: int, day_window: DayWindow
) -> list[tuple[int, int, bool, bool]]:
    """
    Pairwise overlaps (start, end, preferred_a, preferred_b) in minutes for one weekday.

    Empty overlaps are dropped.
    """
    overlaps = []
    for slot_a in player_a.for_day(day):
        for slot_b in player_b.for_day(day):
            start = max(slot_a.start_time, slot_b.start_time, day_window.start_minutes)
            end = min(slot_a.end_time, slot_b.end_time, day_window.end_minutes)
            if end > start:
                overlaps.append((start, end, slot_a.is_preferred, slot_b.is_preferred))
    return overlaps


def iter_windows(
    overlap_start: int, overlap_end: int, slot_duration_minutes: int, step_minutes: int
) -> Iterator[tuple[int, int]]:
    """Yield (start, end) minute pairs of exactly slot_duration_minutes inside the overlap."""
    start = overlap_start
    while start + slot_duration_minutes <= overlap_end:
        yield start, start + slot_duration_minutes
        start += step_minutes


def _is_blocked(window_start: datetime, window_end: datetime, busy: list[BusyEvent]) -> bool:
    return any(event.conflicts_with(window_start, window_end) for event in busy)


def intersect(
    player_a: AvailabilityIndex,
    player_b: AvailabilityIndex,
    target_date: date,
    slot_duration_minutes: int = 120,
    step_minutes: int = 30,
    day_window: DayWindow = DEFAULT_DAY_WINDOW,
    busy_a: Iterable[BusyEvent] | None = None,
    busy_b: Iterable[BusyEvent] | None = None,
    tz: tzinfo = UTC,
) -> list[CandidateSlot]:
    """
    Candidate slots for a single date, ordered by start time.

    Missing busy lists mean "no busy events". No availability for the
    weekday yields an empty list.
    """
    _validate_parameters(slot_duration_minutes, step_minutes, day_window)

    day = day_of_week(target_date)
    overlaps = overlapping_ranges(player_a, player_b, day, day_window)
    if not overlaps:
        return []

    busy = [event.normalized(tz) for event in (*(busy_a or ()), *(busy_b or ()))]
    midnight = datetime.combine(target_date, time(0, 0), tzinfo=tz)

    # Overlapping ranges of the same player can produce the same window twice.
    windows: dict[tuple[int, int], tuple[bool, bool]] = {}
    for overlap_start, overlap_end, preferred_a, preferred_b in overlaps:
        for window in iter_windows(overlap_start, overlap_end, slot_duration_minutes, step_minutes):
            seen_a, seen_b = windows.get(window, (False, False))
            windows[window] = (seen_a or preferred_a, seen_b or preferred_b)

    candidates = []
    for (start_minutes, end_minutes), (preferred_a, preferred_b) in sorted(windows.items()):
        start = midnight + timedelta(minutes=start_minutes)
        end = midnight + timedelta(minutes=end_minutes)
        candidates.append(
            CandidateSlot(
                start=start,
                end=end,
                available=not _is_blocked(start, end, busy),
                day_of_week=day,
                preferred_by_a=preferred_a,
                preferred_by_b=preferred_b,
            )
        )
    return candidates


def intersect_range(
    player_a: AvailabilityIndex,
    player_b: AvailabilityIndex,
    from_date: date,
    to_date: date,
    slot_duration_minutes: int = 120,
    step_minutes: int = 30,
    day_window: DayWindow = DEFAULT_DAY_WINDOW,
    busy_a: Iterable[BusyEvent] | None = None,
    busy_b: Iterable[BusyEvent] | None = None,
    tz: tzinfo = UTC,
) -> list[CandidateSlot]:
    """Apply intersect to every date in [from_date, to_date], in chronological order."""
    if to_date < from_date:
        raise InvalidParameterError(
            f"to_date {to_date.isoformat()} is before from_date {from_date.isoformat()}",
            parameter="to_date",
        )
    _validate_parameters(slot_duration_minutes, step_minutes, day_window)

    busy_a = list(busy_a or ())
    busy_b = list(busy_b or ())

    candidates: list[CandidateSlot] = []
    current = from_date
    while current <= to_date:
        candidates.extend(
            intersect(
                player_a,
                player_b,
                current,
                slot_duration_minutes=slot_duration_minutes,
                step_minutes=step_minutes,
                day_window=day_window,
                busy_a=busy_a,
                busy_b=busy_b,
                tz=tz,
            )
        )
        current += timedelta(days=1)
    return candidates
