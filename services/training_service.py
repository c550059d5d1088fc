"""Daily training score from cumulative activity metrics."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Mapping

from athlete_hub.application.ports import GoalStore, MetricKind, SampleSource
from athlete_hub.config import EngineSettings
from athlete_hub.domain.goals import (
    TRAINING_GOAL_KEYS,
    score_training,
    training_sub_scores,
)
from athlete_hub.domain.models import SampleWindow, TrainingMetrics
from services.base import fetch_with_timeout
from utils.logger import OperationTimer, get_logger

logger = get_logger(__name__)

TRAINING_METRIC_KINDS: dict[str, MetricKind] = {
    "calories": MetricKind.ACTIVE_CALORIES,
    "steps": MetricKind.STEPS,
    "distance": MetricKind.DISTANCE,
    "exercise_minutes": MetricKind.EXERCISE_MINUTES,
}


@dataclass(frozen=True, slots=True)
class TrainingReport:
    """Activity totals, goals and the resulting training score."""

    metrics: TrainingMetrics
    goals: Mapping[str, float | None]
    sub_scores: tuple[float, ...]
    score: int


class TrainingService:
    """Collect activity totals and goals, then score the day."""

    def __init__(
        self,
        source: SampleSource,
        goals: GoalStore,
        settings: EngineSettings | None = None,
    ) -> None:
        self._source = source
        self._goals = goals
        self._settings = settings or EngineSettings()

    async def score_day(
        self, window: SampleWindow, *, athlete_id: str | None = None
    ) -> TrainingReport:
        """Return the training report for activity within ``window``."""

        timer = OperationTimer("score_training", athlete_id=athlete_id)
        timeout = self._settings.fetch_timeout_seconds
        values = await asyncio.gather(
            *(
                fetch_with_timeout(
                    self._source.fetch_metric(TRAINING_METRIC_KINDS[key], window),
                    default=None,
                    timeout=timeout,
                    op=f"fetch_metric:{key}",
                    athlete_id=athlete_id,
                )
                for key in TRAINING_GOAL_KEYS
            )
        )
        goal_values = await asyncio.gather(
            *(
                fetch_with_timeout(
                    self._goals.get_goal(key),
                    default=None,
                    timeout=timeout,
                    op=f"get_goal:{key}",
                    athlete_id=athlete_id,
                )
                for key in TRAINING_GOAL_KEYS
            )
        )

        metrics = TrainingMetrics(**dict(zip(TRAINING_GOAL_KEYS, values)))
        goals = dict(zip(TRAINING_GOAL_KEYS, goal_values))
        report = TrainingReport(
            metrics=metrics,
            goals=goals,
            sub_scores=training_sub_scores(metrics, goals),
            score=score_training(metrics, goals),
        )
        logger.info("Training scored", extra=timer.extra(score=report.score))
        return report


__all__ = ["TRAINING_METRIC_KINDS", "TrainingReport", "TrainingService"]
