"""Nutrition goal tracking and insight messages."""

from __future__ import annotations

import asyncio

from athlete_hub.application.ports import NUTRITION_METRIC_KINDS, GoalStore, SampleSource
from athlete_hub.config import EngineSettings
from athlete_hub.domain.goals import goal_progress_result, score_nutrition
from athlete_hub.domain.models import (
    GoalProgressResult,
    NutritionLog,
    NutritionMetric,
    SampleWindow,
)
from services.base import fetch_with_timeout
from utils import fmt_percent
from utils.logger import OperationTimer, get_logger

logger = get_logger(__name__)

_INSIGHT_LABELS: dict[NutritionMetric, str] = {
    NutritionMetric.CALORIES: "calorie",
    NutritionMetric.PROTEIN: "protein",
    NutritionMetric.WATER: "water",
}


def goal_name(metric: NutritionMetric) -> str:
    """Return the goal store key for a nutrition metric."""

    return NUTRITION_METRIC_KINDS[metric].value


def insight_for(log: NutritionLog, metric: NutritionMetric) -> str | None:
    """Return a one-line progress message for ``metric`` or ``None``."""

    label = _INSIGHT_LABELS.get(metric, metric.value)
    tracked = log.get(metric)
    if not tracked.has_goal:
        if metric is NutritionMetric.CALORIES:
            return f"No {label} data yet."
        return None
    percentage = goal_progress_result(tracked.consumed, tracked.goal).percentage
    if percentage >= 100:
        return f"{label.capitalize()} goal met."
    return f"{fmt_percent(percentage)} of {label} goal."


def nutrition_insights(log: NutritionLog) -> list[str]:
    """Return progress messages for calories, protein and water."""

    messages = (insight_for(log, metric) for metric in _INSIGHT_LABELS)
    return [message for message in messages if message is not None]


def nutrition_progress(log: NutritionLog) -> dict[NutritionMetric, GoalProgressResult]:
    """Return goal progress for every metric that has a target.

    Each result carries the uncapped percentage and the capped 0-100 point
    that metric adds to the nutrition score.
    """

    return {
        metric: goal_progress_result(tracked.consumed, tracked.goal)
        for metric, tracked in log.metrics.items()
        if tracked.has_goal
    }


class NutritionService:
    """Build nutrition logs from a sample source and a goal store."""

    def __init__(
        self,
        source: SampleSource,
        goals: GoalStore,
        settings: EngineSettings | None = None,
    ) -> None:
        self._source = source
        self._goals = goals
        self._settings = settings or EngineSettings()

    async def build_log(
        self, window: SampleWindow, *, athlete_id: str | None = None
    ) -> NutritionLog:
        """Return today's log; every percentage is derived on access."""

        timer = OperationTimer("score_nutrition", athlete_id=athlete_id)
        timeout = self._settings.fetch_timeout_seconds
        metrics = tuple(NutritionMetric)
        consumed = await asyncio.gather(
            *(
                fetch_with_timeout(
                    self._source.fetch_metric(NUTRITION_METRIC_KINDS[metric], window),
                    default=None,
                    timeout=timeout,
                    op=f"fetch_metric:{metric.value}",
                    athlete_id=athlete_id,
                )
                for metric in metrics
            )
        )
        goals = await asyncio.gather(
            *(
                fetch_with_timeout(
                    self._goals.get_goal(goal_name(metric)),
                    default=None,
                    timeout=timeout,
                    op=f"get_goal:{metric.value}",
                    athlete_id=athlete_id,
                )
                for metric in metrics
            )
        )

        log = NutritionLog()
        for metric, amount, goal in zip(metrics, consumed, goals):
            log = log.with_consumed(metric, amount or 0.0).with_goal(metric, goal)
        score = score_nutrition(log)
        logger.info("Nutrition scored: %s", score, extra=timer.extra(score=score))
        return log

    def insights(self, log: NutritionLog) -> list[str]:
        """Return human readable progress messages for ``log``."""

        return nutrition_insights(log)

    def progress(self, log: NutritionLog) -> dict[NutritionMetric, GoalProgressResult]:
        return nutrition_progress(log)


__all__ = [
    "NutritionService",
    "goal_name",
    "insight_for",
    "nutrition_insights",
    "nutrition_progress",
]
