"""Goal progress, training, nutrition and recovery scoring.

Every score here follows the same recipe: divide a measurement by its
target, clamp the ratio to ``[0, 1]``, multiply by a weight and sum or
average the weighted parts. Targets that are missing or not positive are
replaced by ``1`` so that no division by zero can happen.
"""

from __future__ import annotations

from datetime import date, timedelta
from statistics import fmean
from typing import Iterable, Mapping

from athlete_hub.domain.models import (
    GoalMetric,
    GoalProgressResult,
    NutritionLog,
    RecoveryInputs,
    TrainingMetrics,
)

TRAINING_WEIGHT = 25.0
TRAINING_GOAL_KEYS: tuple[str, ...] = (
    "calories",
    "steps",
    "distance",
    "exercise_minutes",
)

RECOVERY_WEIGHT = 100.0
STRESS_CEILING = 30.0


def effective_goal(goal: float | None) -> float:
    """Return ``goal`` when positive, otherwise ``1.0``.

    >>> effective_goal(2000)
    2000.0
    >>> effective_goal(0), effective_goal(None), effective_goal(-5)
    (1.0, 1.0, 1.0)
    """

    return GoalMetric(goal=goal).effective_goal


def progress(consumed: float, goal: float | None) -> int:
    """Return consumed share of ``goal`` in whole percent.

    The value is truncated, never rounded, and may exceed 100.

    >>> progress(1500, 2000)
    75
    >>> progress(250, 100)
    250
    >>> progress(7, 0) == progress(7, 1)
    True
    """

    return GoalMetric(consumed=consumed, goal=goal).percentage


def weighted_ratio(actual: float | None, goal: float | None, weight: float) -> float:
    """Return ``min(actual / goal, 1) * weight`` with absent actuals as zero.

    >>> weighted_ratio(5000, 10000, 25)
    12.5
    >>> weighted_ratio(None, 10000, 25)
    0.0
    >>> weighted_ratio(12000, 10000, 25)
    25.0
    """

    ratio = (actual or 0.0) / effective_goal(goal)
    return min(max(ratio, 0.0), 1.0) * weight


def goal_progress_result(consumed: float, goal: float | None) -> GoalProgressResult:
    """Wrap :func:`progress` with the capped weighted point it contributes."""

    return GoalProgressResult(
        percentage=progress(consumed, goal),
        sub_scores=(weighted_ratio(consumed, goal, 100.0),),
    )


def overall_score(sub_scores: Iterable[float | None]) -> int:
    """Average available sub-scores; ``0`` when none are available.

    >>> overall_score([80, None, 60])
    70
    >>> overall_score([None, None])
    0
    """

    available = [float(value) for value in sub_scores if value is not None]
    if not available:
        return 0
    return int(fmean(available))


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------


def training_sub_scores(
    metrics: TrainingMetrics, goals: Mapping[str, float | None]
) -> tuple[float, ...]:
    """Return the four 25-point parts in :data:`TRAINING_GOAL_KEYS` order."""

    return tuple(
        weighted_ratio(getattr(metrics, key), goals.get(key), TRAINING_WEIGHT)
        for key in TRAINING_GOAL_KEYS
    )


def score_training(metrics: TrainingMetrics, goals: Mapping[str, float | None]) -> int:
    """Return the 0-100 training score for a day of activity.

    >>> score_training(
    ...     TrainingMetrics(calories=600, steps=5000, distance=8, exercise_minutes=15),
    ...     {"calories": 600, "steps": 10000, "distance": 5, "exercise_minutes": 30},
    ... )
    75
    """

    return int(sum(training_sub_scores(metrics, goals)))


# ---------------------------------------------------------------------------
# Nutrition
# ---------------------------------------------------------------------------


def score_nutrition(log: NutritionLog) -> int:
    """Average goal completion of nutrition metrics that have a target.

    Each percentage is capped at 100 before averaging so one over-achieved
    metric cannot hide another that was missed.
    """

    capped = [
        min(metric.percentage, 100)
        for metric in log.metrics.values()
        if metric.has_goal
    ]
    return overall_score(capped)


# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------


def recovery_sub_scores(inputs: RecoveryInputs) -> tuple[float | None, ...]:
    """Return sleep quality, sleep duration, HRV, resting HR and stress parts.

    A part is ``None`` when its measurement or the target it needs is absent.
    """

    sleep_quality = (
        float(inputs.sleep_quality_score)
        if inputs.sleep_quality_score is not None
        else None
    )

    sleep_duration = None
    if inputs.sleep_hours is not None and _positive(inputs.sleep_goal_hours):
        sleep_duration = weighted_ratio(
            inputs.sleep_hours, inputs.sleep_goal_hours, RECOVERY_WEIGHT
        )

    hrv = None
    if inputs.hrv_ms is not None and _positive(inputs.hrv_goal_ms):
        hrv = weighted_ratio(inputs.hrv_ms, inputs.hrv_goal_ms, RECOVERY_WEIGHT)

    resting = None
    if inputs.resting_heart_rate is not None and _positive(
        inputs.resting_heart_rate_goal
    ):
        ratio = inputs.resting_heart_rate / float(inputs.resting_heart_rate_goal)
        resting = max(0.0, min(2.0 - ratio, 1.0)) * RECOVERY_WEIGHT

    stress = None
    if inputs.stress_level is not None:
        stress = max(0.0, 1.0 - inputs.stress_level / STRESS_CEILING) * RECOVERY_WEIGHT

    return (sleep_quality, sleep_duration, hrv, resting, stress)


def score_recovery(inputs: RecoveryInputs) -> int:
    """Return the 0-100 recovery score for an athlete.

    >>> score_recovery(RecoveryInputs(sleep_quality_score=90, stress_level=15))
    70
    >>> score_recovery(RecoveryInputs())
    0
    """

    return min(overall_score(recovery_sub_scores(inputs)), 100)


def _positive(value: float | None) -> bool:
    return value is not None and value > 0


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def fill_last_seven(
    scores_by_day: Mapping[date, int], today: date
) -> tuple[tuple[date, int], ...]:
    """Return seven consecutive days ending ``today``; missing days score 0.

    >>> fill_last_seven({date(2024, 3, 7): 55}, date(2024, 3, 7))[-1]
    (datetime.date(2024, 3, 7), 55)
    >>> len(fill_last_seven({}, date(2024, 3, 7)))
    7
    """

    start = today - timedelta(days=6)
    days = (start + timedelta(days=offset) for offset in range(7))
    return tuple((day, int(scores_by_day.get(day, 0))) for day in days)


__all__ = [
    "TRAINING_GOAL_KEYS",
    "effective_goal",
    "fill_last_seven",
    "overall_score",
    "progress",
    "recovery_sub_scores",
    "goal_progress_result",
    "score_nutrition",
    "score_recovery",
    "score_training",
    "training_sub_scores",
    "weighted_ratio",
]
