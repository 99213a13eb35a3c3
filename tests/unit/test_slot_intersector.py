import random
from datetime import UTC, datetime, timedelta

import pytest

from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.features.scheduling.domain.models import BusyEvent, DayWindow, format_time_of_day
from courtmate.features.scheduling.engine import index_by_day, intersect, intersect_range
from tests.factories import MONDAY, SATURDAY, make_slot


def _at(day, hhmm: str) -> datetime:
    hours, minutes = map(int, hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hours, minutes, tzinfo=UTC)


@pytest.fixture
def players():
    player_a = index_by_day([make_slot(1, "17:00", "20:00", preferred=True)])
    player_b = index_by_day([make_slot(1, "18:00", "19:30", preferred=True)])
    return player_a, player_b


def test_overlap_shorter_than_duration_yields_no_candidates(players):
    player_a, player_b = players

    assert intersect(player_a, player_b, MONDAY, slot_duration_minutes=120) == []


def test_hour_slots_stepped_by_half_hours(players):
    player_a, player_b = players

    slots = intersect(player_a, player_b, MONDAY, slot_duration_minutes=60, step_minutes=30)

    assert [(s.start, s.end) for s in slots] == [
        (_at(MONDAY, "18:00"), _at(MONDAY, "19:00")),
        (_at(MONDAY, "18:30"), _at(MONDAY, "19:30")),
    ]
    assert all(s.available for s in slots)
    assert all(s.preferred_by_a and s.preferred_by_b for s in slots)
    assert all(s.day_of_week == 1 for s in slots)


def test_busy_event_marks_overlapping_slots_unavailable(players):
    player_a, player_b = players
    busy_b = [BusyEvent(start=_at(MONDAY, "18:15"), end=_at(MONDAY, "18:45"))]

    slots = intersect(
        player_a, player_b, MONDAY, slot_duration_minutes=60, step_minutes=30, busy_b=busy_b
    )

    assert len(slots) == 2
    assert [s.available for s in slots] == [False, False]


@pytest.mark.parametrize(
    "busy_start, busy_end, expected",
    [
        ("18:00", "19:00", False),  # exact match
        ("17:00", "20:00", False),  # slot contained in busy interval
        ("18:20", "18:40", False),  # busy interval inside slot
        ("18:50", "19:30", False),  # partial overlap at the end
        ("17:00", "18:00", True),  # ends exactly when the slot starts
        ("19:00", "20:00", True),  # starts exactly when the slot ends
        ("06:00", "07:00", True),  # elsewhere in the day
    ],
)
def test_busy_overlap_rules(busy_start, busy_end, expected):
    player_a = index_by_day([make_slot(1, "18:00", "19:00")])
    player_b = index_by_day([make_slot(1, "18:00", "19:00")])
    busy = [BusyEvent(start=_at(MONDAY, busy_start), end=_at(MONDAY, busy_end))]

    (slot,) = intersect(player_a, player_b, MONDAY, slot_duration_minutes=60, busy_a=busy)

    assert slot.available is expected


def test_zero_duration_is_rejected(players):
    player_a, player_b = players

    with pytest.raises(InvalidParameterError):
        intersect(player_a, player_b, MONDAY, slot_duration_minutes=0)


def test_non_positive_step_is_rejected(players):
    player_a, player_b = players

    with pytest.raises(InvalidParameterError):
        intersect(player_a, player_b, MONDAY, slot_duration_minutes=60, step_minutes=0)


def test_invalid_day_window_is_rejected(players):
    player_a, player_b = players

    with pytest.raises(InvalidParameterError):
        intersect(player_a, player_b, MONDAY, day_window=DayWindow(start_hour=20, end_hour=8))


def test_no_availability_on_target_day_is_empty(players):
    player_a, player_b = players

    assert intersect(player_a, player_b, SATURDAY, slot_duration_minutes=60) == []
    assert intersect(player_a, index_by_day([]), MONDAY, slot_duration_minutes=60) == []


def test_overlap_is_clipped_to_day_window():
    player_a = index_by_day([make_slot(1, "04:00", "23:30")])
    player_b = index_by_day([make_slot(1, "00:00", "24:00")])

    slots = intersect(player_a, player_b, MONDAY, slot_duration_minutes=120, step_minutes=60)

    assert slots[0].start == _at(MONDAY, "06:00")
    assert slots[-1].end == _at(MONDAY, "22:00")
    assert len(slots) == 15


def test_every_pair_of_disjoint_ranges_is_intersected():
    player_a = index_by_day([make_slot(1, "08:00", "10:00"), make_slot(1, "18:00", "20:00")])
    player_b = index_by_day([make_slot(1, "07:00", "21:00")])

    slots = intersect(player_a, player_b, MONDAY, slot_duration_minutes=120)

    assert [s.start for s in slots] == [_at(MONDAY, "08:00"), _at(MONDAY, "18:00")]


def test_overlapping_ranges_do_not_duplicate_windows():
    player_a = index_by_day(
        [make_slot(1, "09:00", "11:00"), make_slot(1, "09:00", "12:00", preferred=True)]
    )
    player_b = index_by_day([make_slot(1, "09:00", "12:00")])

    slots = intersect(player_a, player_b, MONDAY, slot_duration_minutes=120, step_minutes=60)

    assert [s.start for s in slots] == [_at(MONDAY, "09:00"), _at(MONDAY, "10:00")]
    assert slots[0].preferred_by_a is True


def test_intersect_is_idempotent(players):
    player_a, player_b = players
    busy = [BusyEvent(start=_at(MONDAY, "18:40"), end=_at(MONDAY, "19:10"))]

    kwargs = {"slot_duration_minutes": 30, "step_minutes": 15, "busy_a": busy}

    first = intersect(player_a, player_b, MONDAY, **kwargs)
    second = intersect(player_a, player_b, MONDAY, **kwargs)

    assert first == second


def test_naive_busy_events_use_scheduling_timezone(players):
    player_a, player_b = players
    naive_busy = [BusyEvent(start=datetime(2024, 1, 1, 18, 0), end=datetime(2024, 1, 1, 18, 30))]

    slots = intersect(
        player_a, player_b, MONDAY, slot_duration_minutes=60, step_minutes=30, busy_a=naive_busy
    )

    assert [s.available for s in slots] == [False, True]


def test_randomized_slots_respect_duration_and_window():
    rng = random.Random(42)
    window = DayWindow(start_hour=6, end_hour=22)

    for _ in range(200):
        slots_a, slots_b = [], []
        for slots in (slots_a, slots_b):
            for _ in range(rng.randint(0, 3)):
                start = rng.randrange(0, 23 * 60, 15)
                end = rng.randrange(start + 15, 24 * 60 + 1, 15)
                slots.append(make_slot(1, format_time_of_day(start), format_time_of_day(end)))
        duration = rng.choice([30, 60, 90, 120])
        step = rng.choice([15, 30, 60])

        result = intersect(
            index_by_day(slots_a),
            index_by_day(slots_b),
            MONDAY,
            slot_duration_minutes=duration,
            step_minutes=step,
            day_window=window,
        )

        for slot in result:
            assert slot.duration_minutes == duration
            assert slot.start < slot.end
            assert slot.start >= _at(MONDAY, "06:00")
            assert slot.end <= _at(MONDAY, "22:00")
        assert [s.start for s in result] == sorted(s.start for s in result)


def test_intersect_range_concatenates_days_in_order():
    player_a = index_by_day([make_slot(1, "18:00", "20:00"), make_slot(6, "09:00", "11:00")])
    player_b = index_by_day([make_slot(1, "18:00", "20:00"), make_slot(6, "09:00", "11:00")])

    slots = intersect_range(player_a, player_b, MONDAY, MONDAY + timedelta(days=13))

    assert [s.start for s in slots] == [
        _at(MONDAY, "18:00"),
        _at(SATURDAY, "09:00"),
        _at(MONDAY + timedelta(days=7), "18:00"),
        _at(SATURDAY + timedelta(days=7), "09:00"),
    ]


def test_intersect_range_single_day_matches_intersect(players):
    player_a, player_b = players

    assert intersect_range(
        player_a, player_b, MONDAY, MONDAY, slot_duration_minutes=60
    ) == intersect(player_a, player_b, MONDAY, slot_duration_minutes=60)


def test_intersect_range_rejects_inverted_dates(players):
    player_a, player_b = players

    with pytest.raises(InvalidParameterError):
        intersect_range(player_a, player_b, MONDAY, MONDAY - timedelta(days=1))
