import random
from datetime import UTC, datetime, timedelta

import pytest

from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.features.scheduling.domain.models import (
    CandidateSlot,
    Compatibility,
    RankingCandidate,
    ScoringWeights,
    day_of_week,
)
from courtmate.features.scheduling.engine import rank, score
from courtmate.features.scheduling.engine.confidence_ranker import (
    FALLBACK_REASON,
    is_optimal_time,
)
from tests.factories import MONDAY, SATURDAY


def _candidate(
    day,
    hour,
    minute=0,
    opponent_id="opponent",
    preference_a=False,
    preference_b=False,
    compatibility=None,
):
    start = datetime(day.year, day.month, day.day, hour, minute, tzinfo=UTC)
    slot = CandidateSlot(
        start=start,
        end=start + timedelta(hours=2),
        day_of_week=day_of_week(day),
        preferred_by_a=preference_a,
        preferred_by_b=preference_b,
    )
    return RankingCandidate(
        slot=slot,
        opponent_id=opponent_id,
        preference_a=preference_a,
        preference_b=preference_b,
        compatibility=Compatibility(score=compatibility) if compatibility is not None else None,
    )


def test_all_bonuses_clamp_to_one_and_rank_first():
    best = _candidate(SATURDAY, 10, opponent_id="b", preference_a=True, preference_b=True)
    plain = _candidate(MONDAY, 13, opponent_id="a")

    ranked = rank([plain, best], max_results=10)

    assert [s.opponent_id for s in ranked] == ["b", "a"]
    assert ranked[0].confidence == 1.0
    assert ranked[1].confidence == 0.5
    assert ranked[0].reason == (
        "Great time because: both players' preferred time, optimal weekend morning slot, "
        "weekend availability, high success probability"
    )


def test_no_bonus_uses_fallback_reason():
    confidence, reason = score(_candidate(MONDAY, 13))

    assert confidence == 0.5
    assert reason == FALLBACK_REASON


def test_weekday_evening_with_one_preference_and_compatibility():
    candidate = _candidate(MONDAY, 18, preference_b=True, compatibility=0.6)

    confidence, reason = score(candidate)

    assert confidence == pytest.approx(0.97)
    assert reason == (
        "Great time because: one player's preferred time, compatible player, "
        "popular evening time, high success probability"
    )


def test_compatibility_labels():
    high_confidence, high_reason = score(_candidate(MONDAY, 13, compatibility=0.9))
    low_confidence, low_reason = score(_candidate(MONDAY, 13, compatibility=0.3))

    assert high_confidence == pytest.approx(0.68)
    assert high_reason == "Great time because: highly compatible player"
    assert low_confidence == pytest.approx(0.56)
    assert low_reason == FALLBACK_REASON


@pytest.mark.parametrize(
    "hour, weekend, expected",
    [
        (17, False, True),
        (19, False, True),
        (20, False, False),
        (10, False, False),
        (9, True, True),
        (11, True, True),
        (12, True, False),
        (18, True, False),
    ],
)
def test_optimal_time_bands_are_inclusive(hour, weekend, expected):
    assert is_optimal_time(hour, weekend) is expected


def test_sunday_counts_as_weekend():
    sunday = SATURDAY + timedelta(days=1)

    confidence, reason = score(_candidate(sunday, 15))

    assert confidence == pytest.approx(0.6)
    assert reason == "Great time because: weekend availability"


def test_custom_weights_change_score():
    weights = ScoringWeights(base=0.2, weekend=0.0, optimal_time=0.0)

    confidence, _ = score(_candidate(SATURDAY, 10), weights)

    assert confidence == pytest.approx(0.2)


def test_confidence_always_within_unit_interval():
    rng = random.Random(7)
    days = [MONDAY + timedelta(days=offset) for offset in range(7)]

    for _ in range(1000):
        weights = ScoringWeights(
            base=rng.uniform(-1, 1.5),
            both_preferred=rng.uniform(-1, 1),
            one_preferred=rng.uniform(-1, 1),
            optimal_time=rng.uniform(-1, 1),
            weekend=rng.uniform(-1, 1),
            compatibility=rng.uniform(-1, 1),
        )
        candidate = _candidate(
            rng.choice(days),
            rng.randint(0, 23),
            preference_a=rng.random() < 0.5,
            preference_b=rng.random() < 0.5,
            compatibility=rng.choice([None, rng.uniform(-0.5, 1.5)]),
        )

        confidence, reason = score(candidate, weights)

        assert 0.0 <= confidence <= 1.0
        assert reason


def test_ties_break_on_start_then_opponent():
    later = _candidate(MONDAY, 14, opponent_id="a")
    earlier_b = _candidate(MONDAY, 12, opponent_id="b")
    earlier_a = _candidate(MONDAY, 12, opponent_id="a")

    ranked = rank([later, earlier_b, earlier_a], max_results=10)

    assert [(s.datetime.hour, s.opponent_id) for s in ranked] == [(12, "a"), (12, "b"), (14, "a")]


def test_ranking_is_sorted_and_capped():
    rng = random.Random(3)
    candidates = [
        _candidate(
            MONDAY + timedelta(days=rng.randint(0, 6)),
            rng.randint(6, 20),
            opponent_id=f"p{i}",
            preference_a=rng.random() < 0.5,
            preference_b=rng.random() < 0.5,
            compatibility=rng.random(),
        )
        for i in range(40)
    ]

    ranked = rank(candidates, max_results=5)

    assert len(ranked) == 5
    confidences = [s.confidence for s in ranked]
    assert confidences == sorted(confidences, reverse=True)
    assert max(score(c)[0] for c in candidates) == confidences[0]


def test_zero_max_results_returns_nothing():
    assert rank([_candidate(MONDAY, 18)], max_results=0) == []


def test_negative_max_results_is_rejected():
    with pytest.raises(InvalidParameterError):
        rank([_candidate(MONDAY, 18)], max_results=-1)


def test_suggestion_carries_slot_details():
    candidate = _candidate(SATURDAY, 9, minute=30, opponent_id="x")

    (suggestion,) = rank([candidate], max_results=1)

    assert suggestion.datetime == candidate.slot.start
    assert suggestion.end == candidate.slot.end
    assert suggestion.day_of_week == 6
    assert suggestion.opponent_id == "x"
