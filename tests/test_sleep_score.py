"""Unit tests for sleep aggregation and the composite sleep score."""

from __future__ import annotations

import doctest
import random
from datetime import datetime

import pytest

from athlete_hub import score_sleep
from athlete_hub.domain import sleep
from athlete_hub.domain.models import (
    SleepAggregate,
    SleepCategory,
    SleepScoreResult,
    SleepTier,
)
from athlete_hub.domain.sleep import (
    aggregate_night,
    score_aggregate,
    sleep_sub_scores,
    stage_balance_distance,
)
from tests.factories import SampleFactory, build_night


def test_doctests_pass() -> None:
    """Ensure doctests stay in sync with implementation."""

    results = doctest.testmod(sleep)
    assert results.failed == 0


def test_aggregate_totals_and_awakenings(scored_night) -> None:
    aggregate = aggregate_night(scored_night)

    assert aggregate.light_duration == pytest.approx(4.0)
    assert aggregate.deep_duration == pytest.approx(2.0)
    assert aggregate.rem_duration == pytest.approx(2.0)
    assert aggregate.awake_duration == pytest.approx(0.5)
    assert aggregate.total_sleep == pytest.approx(8.0)
    assert aggregate.total_time == pytest.approx(8.5)
    assert aggregate.awakenings == 1


def test_awakenings_are_counted_after_sorting() -> None:
    samples = build_night(
        datetime(2024, 3, 1, 23, 0),
        [
            (SleepCategory.LIGHT, 1.0),
            (SleepCategory.AWAKE, 0.25),
            (SleepCategory.AWAKE, 0.25),
            (SleepCategory.DEEP, 1.0),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.REM, 1.0),
        ],
    )
    shuffled = list(samples)
    random.Random(7).shuffle(shuffled)

    assert aggregate_night(shuffled).awakenings == 2
    assert aggregate_night(shuffled) == aggregate_night(samples)


def test_night_starting_awake_is_not_an_awakening() -> None:
    samples = build_night(
        datetime(2024, 3, 1, 23, 0),
        [(SleepCategory.AWAKE, 0.5), (SleepCategory.LIGHT, 6.0)],
    )

    assert aggregate_night(samples).awakenings == 0


def test_in_bed_is_tracked_but_not_counted_as_sleep() -> None:
    samples = build_night(
        datetime(2024, 3, 1, 22, 0),
        [
            (SleepCategory.IN_BED, 1.0),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.LIGHT, 3.0),
            (SleepCategory.UNKNOWN, 0.5),
        ],
    )

    aggregate = aggregate_night(samples)

    assert aggregate.stage_durations[SleepCategory.IN_BED] == pytest.approx(1.0)
    assert aggregate.stage_durations[SleepCategory.UNKNOWN] == pytest.approx(0.5)
    assert aggregate.total_sleep == pytest.approx(3.0)
    assert aggregate.awake_duration == pytest.approx(0.5)
    assert aggregate.awakenings == 1


def test_empty_aggregate_has_all_stage_keys() -> None:
    aggregate = aggregate_night([])

    assert set(aggregate.stage_durations) == {
        SleepCategory.AWAKE,
        SleepCategory.LIGHT,
        SleepCategory.REM,
        SleepCategory.DEEP,
    }
    assert aggregate.total_sleep == 0.0
    assert aggregate.awakenings == 0


def test_reference_night_scores_97_good(scored_night) -> None:
    result = score_sleep(scored_night)

    assert result.score == 97
    assert result.tier is SleepTier.GOOD
    parts = result.sub_scores
    assert parts is not None
    assert parts.duration == pytest.approx(40.0)
    assert parts.awake_penalty == pytest.approx((1 - 0.5 / 8.5) * 20)
    assert parts.awakening_penalty == pytest.approx(18.0)
    assert parts.deep_sufficiency == pytest.approx(10.0)
    assert parts.stage_balance == pytest.approx(10.0)
    assert parts.total == pytest.approx(96.8235, abs=1e-3)


def test_scoring_is_idempotent(scored_night) -> None:
    assert score_sleep(scored_night) == score_sleep(scored_night)
    aggregate = aggregate_night(scored_night)
    assert score_aggregate(aggregate) == score_aggregate(aggregate)


def test_no_sleep_boundary_avoids_division_by_zero() -> None:
    aggregate = SleepAggregate(awake_duration=1.0)

    parts = sleep_sub_scores(aggregate)

    assert parts.duration == 0.0
    assert parts.deep_sufficiency == 0.0
    assert stage_balance_distance(aggregate) == pytest.approx(1.0)
    assert parts.stage_balance == 0.0
    assert score_aggregate(aggregate).tier is SleepTier.POOR


@pytest.mark.parametrize(
    "aggregate",
    [
        SleepAggregate(),
        SleepAggregate(total_sleep=12.0, light_duration=12.0),
        SleepAggregate(
            total_sleep=9.0,
            deep_duration=4.0,
            rem_duration=4.0,
            light_duration=1.0,
            awake_duration=3.0,
            awakenings=25,
        ),
        SleepAggregate(total_sleep=0.4, deep_duration=0.4, awakenings=3),
    ],
)
def test_sub_scores_stay_within_bounds(aggregate: SleepAggregate) -> None:
    parts = sleep_sub_scores(aggregate)

    assert 0.0 <= parts.duration <= 40.0
    assert 0.0 <= parts.awake_penalty <= 20.0
    assert 0.0 <= parts.awakening_penalty <= 20.0
    assert 0.0 <= parts.deep_sufficiency <= 10.0
    assert 0.0 <= parts.stage_balance <= 10.0
    assert 0 <= score_aggregate(aggregate).score <= 100


def test_score_rounds_half_up() -> None:
    assert sleep._round_half_up(96.5) == 97
    assert sleep._round_half_up(96.49) == 96
    assert sleep._round_half_up(0.5) == 1


def test_empty_and_malformed_input_score_zero_poor() -> None:
    bad = SampleFactory.build(
        start=datetime(2024, 3, 2, 3, 0), end=datetime(2024, 3, 2, 2, 0)
    )

    assert score_sleep([]) == SleepScoreResult(score=0, tier=SleepTier.POOR)
    assert score_sleep([bad]) == SleepScoreResult(
        score=0, tier=SleepTier.POOR, rejected=1
    )


def test_rejected_samples_are_counted_on_the_result(scored_night) -> None:
    bad = SampleFactory.build(
        start=datetime(2024, 3, 2, 4, 0), end=datetime(2024, 3, 2, 4, 0)
    )

    result = score_sleep([bad, *scored_night])

    assert result.rejected == 1
    assert result.score == score_sleep(scored_night).score == 97
    assert score_sleep(scored_night).rejected == 0


def test_shorter_restless_night_is_fair() -> None:
    samples = build_night(
        datetime(2024, 3, 1, 23, 30),
        [
            (SleepCategory.LIGHT, 2.0),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.DEEP, 0.5),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.REM, 0.5),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.LIGHT, 2.0),
        ],
    )

    result = score_sleep(samples)

    assert result.tier is SleepTier.FAIR
    assert 60 <= result.score < 80
