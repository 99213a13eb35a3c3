"""
Domain models for the smart scheduling feature.

Everything here is a value object. Times of day are stored as minutes since
midnight; absolute instants are timezone-aware datetimes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, tzinfo
from typing import Any

from .errors import ValidationError

MINUTES_PER_DAY = 24 * 60


def day_of_week(value: date) -> int:
    """Day of week with 0 = Sunday (Python's weekday() uses 0 = Monday)."""
    return (value.weekday() + 1) % 7


def is_weekend(day: int) -> bool:
    return day in (0, 6)


def parse_time_of_day(value: Any) -> int:
    """
    Convert "HH:MM", "HH:MM:SS", a datetime.time or an int to minutes since midnight.

    "24:00" is accepted so a range can run to the end of the day.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid time of day: {value!r}")
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, time):
        minutes = value.hour * 60 + value.minute
    elif isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) not in (2, 3):
            raise ValidationError(f"Invalid time of day: {value!r}")
        try:
            hours, mins = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise ValidationError(f"Invalid time of day: {value!r}") from e
        if not 0 <= mins < 60:
            raise ValidationError(f"Invalid time of day: {value!r}")
        minutes = hours * 60 + mins
    else:
        raise ValidationError(f"Invalid time of day: {value!r}")

    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValidationError(f"Time of day out of range: {value!r}")
    return minutes


def format_time_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def ensure_aware(value: datetime, tz: tzinfo) -> datetime:
    """Attach tz to naive datetimes; aware datetimes are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


@dataclass(frozen=True, slots=True)
class AvailabilitySlot:
    """One weekly recurring block a player is willing to play."""

    day_of_week: int
    start_time: int
    end_time: int
    is_preferred: bool = False
    id: str | None = None
    user_id: str | None = None

    def validate(self) -> None:
        if not isinstance(self.day_of_week, int) or not 0 <= self.day_of_week <= 6:
            raise ValidationError(
                f"day_of_week must be between 0 and 6, got {self.day_of_week!r}",
                field="day_of_week",
            )
        if not 0 <= self.start_time <= MINUTES_PER_DAY or not 0 <= self.end_time <= MINUTES_PER_DAY:
            raise ValidationError("start_time and end_time must be within the day", field="time")
        if self.start_time >= self.end_time:
            raise ValidationError(
                f"start_time {format_time_of_day(self.start_time)} must be before "
                f"end_time {format_time_of_day(self.end_time)}",
                field="time",
            )

    @classmethod
    def from_row(cls, row: dict) -> AvailabilitySlot:
        """Build from a user_availability row; raises ValidationError on bad data."""
        try:
            day = int(row["day_of_week"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid day_of_week in row: {row!r}", field="day_of_week"
            ) from e
        if "start_time" not in row or "end_time" not in row:
            raise ValidationError("Row is missing start_time/end_time", field="time")

        slot = cls(
            day_of_week=day,
            start_time=parse_time_of_day(row["start_time"]),
            end_time=parse_time_of_day(row["end_time"]),
            is_preferred=bool(row.get("is_preferred", False)),
            id=str(row["id"]) if row.get("id") is not None else None,
            user_id=str(row["user_id"]) if row.get("user_id") is not None else None,
        )
        slot.validate()
        return slot


@dataclass(frozen=True, slots=True)
class BusyEvent:
    """An absolute interval taken from an external calendar."""

    start: datetime
    end: datetime
    summary: str = ""

    def conflicts_with(self, other_start: datetime, other_end: datetime) -> bool:
        """Overlap check: events conflict if one starts before the other ends."""
        return self.start < other_end and self.end > other_start

    def normalized(self, tz: tzinfo) -> BusyEvent:
        return BusyEvent(
            start=ensure_aware(self.start, tz),
            end=ensure_aware(self.end, tz),
            summary=self.summary,
        )

    @staticmethod
    def _parse_google_datetime(dt_data: dict, tz: tzinfo) -> datetime | None:
        if not dt_data:
            return None

        # All-day events (date only)
        if "date" in dt_data:
            return datetime.strptime(dt_data["date"], "%Y-%m-%d").replace(tzinfo=tz)

        if "dateTime" in dt_data:
            try:
                parsed = datetime.fromisoformat(dt_data["dateTime"].replace("Z", "+00:00"))
            except ValueError:
                return None
            return ensure_aware(parsed, tz)

        return None

    @classmethod
    def from_google_event(cls, data: dict, tz: tzinfo = UTC) -> BusyEvent | None:
        """
        Build a busy event from a Google Calendar event payload.

        Returns None for events that do not block time (cancelled, tentative,
        transparent) or that carry no usable start/end.
        """
        transparency = data.get("transparency", "opaque")
        status = data.get("status", "confirmed")
        if transparency != "opaque" or status != "confirmed":
            return None

        start = cls._parse_google_datetime(data.get("start", {}), tz)
        end = cls._parse_google_datetime(data.get("end", {}), tz)
        if start is None or end is None or end <= start:
            return None

        return cls(start=start, end=end, summary=data.get("summary", ""))


@dataclass(frozen=True, slots=True)
class DayWindow:
    """Local operating hours within which candidate slots may fall."""

    start_hour: int = 6
    end_hour: int = 22

    @property
    def start_minutes(self) -> int:
        return self.start_hour * 60

    @property
    def end_minutes(self) -> int:
        return self.end_hour * 60

    def is_valid(self) -> bool:
        return 0 <= self.start_hour < self.end_hour <= 24


@dataclass(frozen=True, slots=True)
class CandidateSlot:
    """A concrete fixed-length window both players are free for (unless busy)."""

    start: datetime
    end: datetime
    available: bool = True
    day_of_week: int = 0
    preferred_by_a: bool = False
    preferred_by_b: bool = False

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True, slots=True)
class Compatibility:
    """Externally supplied compatibility between two players."""

    score: float
    factors: tuple[str, ...] = ()
    reasoning: str | None = None


@dataclass(frozen=True, slots=True)
class RankingCandidate:
    slot: CandidateSlot
    opponent_id: str
    preference_a: bool = False
    preference_b: bool = False
    compatibility: Compatibility | None = None


@dataclass(frozen=True, slots=True)
class Suggestion:
    opponent_id: str
    datetime: datetime
    end: datetime
    confidence: float
    reason: str
    day_of_week: int


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Additive weights used by the confidence ranker."""

    base: float = 0.5
    both_preferred: float = 0.3
    one_preferred: float = 0.15
    optimal_time: float = 0.2
    weekend: float = 0.1
    compatibility: float = 0.2
    weekend_hours: tuple[int, int] = (9, 11)
    weekday_hours: tuple[int, int] = (17, 19)


@dataclass(frozen=True, slots=True)
class SchedulingConfig:
    timezone: str = "UTC"
    day_window: DayWindow = field(default_factory=DayWindow)
    slot_duration_minutes: int = 120
    step_minutes: int = 30
    max_suggestions: int = 10
    days_ahead: int = 14
    weights: ScoringWeights = field(default_factory=ScoringWeights)
