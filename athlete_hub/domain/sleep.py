"""Sleep night segmentation and composite quality scoring.

The module turns an unordered bag of sleep-analysis intervals into a single
night, aggregates time spent in every stage and combines five bounded
sub-scores into a 0-100 quality score:

* duration: ``min(sleep / 8, 1) * 40``
* awake penalty: ``max(0, 1 - awake / max(sleep + awake, 1)) * 20``
* awakening penalty: ``max(0, 1 - awakenings / 10) * 20``
* deep sufficiency: ``min(deep / 1.5, 1) * 10``
* stage balance: ``max(0, 1 - L1(ideal, actual)) * 10``

All durations are hours. Functions are pure; callers own I/O.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Sequence

from athlete_hub.domain.models import (
    SLEEP_STAGES,
    Night,
    Sample,
    SampleWindow,
    SleepAggregate,
    SleepCategory,
    SleepScoreResult,
    SleepSubScores,
    SleepTier,
)

DEFAULT_LOOKBACK_HOURS = 24

TARGET_SLEEP_HOURS = 8.0
TARGET_DEEP_HOURS = 1.5
MAX_AWAKENINGS = 10.0

DURATION_WEIGHT = 40.0
AWAKE_WEIGHT = 20.0
AWAKENING_WEIGHT = 20.0
DEEP_WEIGHT = 10.0
BALANCE_WEIGHT = 10.0

IDEAL_STAGE_FRACTIONS: dict[SleepCategory, float] = {
    SleepCategory.DEEP: 0.25,
    SleepCategory.REM: 0.25,
    SleepCategory.LIGHT: 0.50,
}

GOOD_THRESHOLD = 80
FAIR_THRESHOLD = 60


# ---------------------------------------------------------------------------
# Night segmentation
# ---------------------------------------------------------------------------


def lookback_window(
    now: datetime, hours: float = DEFAULT_LOOKBACK_HOURS
) -> SampleWindow:
    """Return the window of ``hours`` ending at ``now``.

    >>> w = lookback_window(datetime(2024, 3, 2, 9, 0))
    >>> (w.start.isoformat(), w.end.isoformat())
    ('2024-03-01T09:00:00', '2024-03-02T09:00:00')
    """

    if hours <= 0:
        raise ValueError("lookback hours must be positive")
    return SampleWindow(start=now - timedelta(hours=hours), end=now)


def align_moment(
    moment: datetime, reference: datetime, tz: tzinfo | None = None
) -> datetime:
    """Return ``moment`` with the same awareness as ``reference``.

    Naive timestamps are local wall-clock time in ``tz`` (system local time
    when ``tz`` is ``None``).

    >>> from datetime import timezone
    >>> utc = timezone.utc
    >>> align_moment(datetime(2024, 3, 2, 6), datetime(2024, 3, 2, tzinfo=utc), utc)
    datetime.datetime(2024, 3, 2, 6, 0, tzinfo=datetime.timezone.utc)
    >>> align_moment(datetime(2024, 3, 2, 6, tzinfo=utc), datetime(2024, 3, 2), utc)
    datetime.datetime(2024, 3, 2, 6, 0)
    """

    if (moment.tzinfo is None) == (reference.tzinfo is None):
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz) if tz is not None else moment.astimezone()
    return moment.astimezone(tz).replace(tzinfo=None)


def samples_in_window(
    samples: Iterable[Sample], window: SampleWindow, *, tz: tzinfo | None = None
) -> tuple[Sample, ...]:
    """Keep samples that overlap ``window``.

    Returned samples carry timestamps with the window's awareness, so a
    source mixing naive and aware values still yields a sortable night.
    """

    kept: list[Sample] = []
    for sample in samples:
        start = align_moment(sample.start, window.start, tz)
        end = align_moment(sample.end, window.start, tz)
        if start is not sample.start or end is not sample.end:
            sample = Sample(category=sample.category, start=start, end=end)
        if window.overlaps(sample):
            kept.append(sample)
    return tuple(kept)


def partition_samples(samples: Iterable[Sample]) -> tuple[tuple[Sample, ...], int]:
    """Split samples into well-formed ones and a count of rejected ones.

    A sample whose end is not after its start breaks the source contract and
    is excluded from every aggregate.
    """

    valid: list[Sample] = []
    rejected = 0
    for sample in samples:
        if sample.is_valid:
            valid.append(sample)
        else:
            rejected += 1
    return tuple(valid), rejected


def sleep_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Return the local calendar day ``moment`` falls on.

    Naive datetimes are taken as local wall-clock time already. Aware ones
    are converted to ``tz`` (system local time when ``tz`` is ``None``).
    """

    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def select_night(samples: Iterable[Sample], *, tz: tzinfo | None = None) -> Night:
    """Group samples by the day they end on and return the longest group.

    When two days have exactly the same total duration either may be
    returned; the first one met in ``samples`` currently wins.

    >>> s = [
    ...     Sample(SleepCategory.LIGHT, datetime(2024, 3, 1, 1), datetime(2024, 3, 1, 6)),
    ...     Sample(SleepCategory.DEEP, datetime(2024, 3, 1, 23), datetime(2024, 3, 2, 6)),
    ... ]
    >>> select_night(s).day
    datetime.date(2024, 3, 2)
    >>> select_night([]).is_empty
    True
    """

    valid, rejected = partition_samples(samples)
    if not valid:
        return Night(day=None, samples=(), rejected=rejected)

    groups = group_by_day(valid, tz=tz)
    selected_day = max(
        groups, key=lambda day: sum(sample.duration_hours for sample in groups[day])
    )
    return Night(
        day=selected_day,
        samples=tuple(groups[selected_day]),
        rejected=rejected,
    )


def group_by_day(
    samples: Iterable[Sample], *, tz: tzinfo | None = None
) -> dict[date, list[Sample]]:
    """Bucket samples by the local day their end timestamp falls on."""

    groups: dict[date, list[Sample]] = defaultdict(list)
    for sample in samples:
        groups[sleep_day(sample.end, tz)].append(sample)
    return dict(groups)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_night(samples: Sequence[Sample]) -> SleepAggregate:
    """Return per-stage durations and awakening count for one night.

    Samples are sorted by start time before scanning. An awakening is a
    transition into ``AWAKE`` from any other category; a night that starts
    awake does not count that first sample.

    >>> t = datetime(2024, 3, 1, 23)
    >>> h = timedelta(hours=1)
    >>> agg = aggregate_night([
    ...     Sample(SleepCategory.AWAKE, t, t + h),
    ...     Sample(SleepCategory.DEEP, t + h, t + 3 * h),
    ...     Sample(SleepCategory.AWAKE, t + 3 * h, t + 4 * h),
    ... ])
    >>> (agg.total_sleep, agg.awake_duration, agg.awakenings)
    (2.0, 2.0, 1)
    """

    ordered = sorted(samples, key=lambda sample: (sample.start, sample.end))
    stage_durations: dict[SleepCategory, float] = {stage: 0.0 for stage in SLEEP_STAGES}
    awakenings = 0
    previous: SleepCategory | None = None

    for sample in ordered:
        duration = sample.duration_hours
        stage_durations[sample.category] = (
            stage_durations.get(sample.category, 0.0) + duration
        )
        if (
            sample.category is SleepCategory.AWAKE
            and previous is not None
            and previous is not SleepCategory.AWAKE
        ):
            awakenings += 1
        previous = sample.category

    deep = stage_durations[SleepCategory.DEEP]
    rem = stage_durations[SleepCategory.REM]
    light = stage_durations[SleepCategory.LIGHT]
    return SleepAggregate(
        total_sleep=light + rem + deep,
        awake_duration=stage_durations[SleepCategory.AWAKE],
        deep_duration=deep,
        rem_duration=rem,
        light_duration=light,
        awakenings=awakenings,
        stage_durations=stage_durations,
    )


# ---------------------------------------------------------------------------
# Composite scoring
# ---------------------------------------------------------------------------


def stage_balance_distance(aggregate: SleepAggregate) -> float:
    """Return the L1 distance between ideal and actual stage fractions."""

    total_stage_sleep = max(
        aggregate.deep_duration + aggregate.rem_duration + aggregate.light_duration,
        1.0,
    )
    actual = {
        SleepCategory.DEEP: aggregate.deep_duration / total_stage_sleep,
        SleepCategory.REM: aggregate.rem_duration / total_stage_sleep,
        SleepCategory.LIGHT: aggregate.light_duration / total_stage_sleep,
    }
    return sum(
        abs(ideal - actual[stage]) for stage, ideal in IDEAL_STAGE_FRACTIONS.items()
    )


def sleep_sub_scores(aggregate: SleepAggregate) -> SleepSubScores:
    """Compute the five weighted components for ``aggregate``."""

    total_time = aggregate.total_time
    return SleepSubScores(
        duration=min(aggregate.total_sleep / TARGET_SLEEP_HOURS, 1.0)
        * DURATION_WEIGHT,
        awake_penalty=max(0.0, 1.0 - aggregate.awake_duration / max(total_time, 1.0))
        * AWAKE_WEIGHT,
        awakening_penalty=max(0.0, 1.0 - aggregate.awakenings / MAX_AWAKENINGS)
        * AWAKENING_WEIGHT,
        deep_sufficiency=min(aggregate.deep_duration / TARGET_DEEP_HOURS, 1.0)
        * DEEP_WEIGHT,
        stage_balance=max(0.0, 1.0 - stage_balance_distance(aggregate))
        * BALANCE_WEIGHT,
    )


def sleep_tier(score: int) -> SleepTier:
    """Bucket a 0-100 score.

    >>> [sleep_tier(value).value for value in (80, 79, 60, 59)]
    ['Good', 'Fair', 'Fair', 'Poor']
    """

    if score >= GOOD_THRESHOLD:
        return SleepTier.GOOD
    if score >= FAIR_THRESHOLD:
        return SleepTier.FAIR
    return SleepTier.POOR


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_aggregate(aggregate: SleepAggregate) -> SleepScoreResult:
    """Combine sub-scores into the final sleep quality result."""

    sub_scores = sleep_sub_scores(aggregate)
    score = min(max(_round_half_up(sub_scores.total), 0), 100)
    return SleepScoreResult(score=score, tier=sleep_tier(score), sub_scores=sub_scores)


def score_sleep(samples: Iterable[Sample], *, tz: tzinfo | None = None) -> SleepScoreResult:
    """Segment, aggregate and score raw samples.

    No usable samples is a valid state and yields score ``0`` / ``Poor``.
    Malformed samples are counted on the result's ``rejected`` field.
    """

    night = select_night(samples, tz=tz)
    if night.is_empty:
        return SleepScoreResult(score=0, tier=SleepTier.POOR, rejected=night.rejected)
    return replace(
        score_aggregate(aggregate_night(night.samples)), rejected=night.rejected
    )


def nightly_scores(
    samples: Iterable[Sample], *, tz: tzinfo | None = None
) -> dict[date, int]:
    """Score every night found in ``samples``, keyed by its sleep day."""

    valid, _ = partition_samples(samples)
    return {
        day: score_aggregate(aggregate_night(night)).score
        for day, night in group_by_day(valid, tz=tz).items()
    }


__all__ = [
    "DEFAULT_LOOKBACK_HOURS",
    "IDEAL_STAGE_FRACTIONS",
    "aggregate_night",
    "align_moment",
    "group_by_day",
    "lookback_window",
    "nightly_scores",
    "partition_samples",
    "samples_in_window",
    "score_aggregate",
    "score_sleep",
    "select_night",
    "sleep_day",
    "sleep_sub_scores",
    "sleep_tier",
    "stage_balance_distance",
]
