"""Combine sleep, training, nutrition and recovery into one athlete summary."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime

from athlete_hub.application.ports import GoalStore, MetricKind, SampleSource
from athlete_hub.config import EngineSettings
from athlete_hub.domain.goals import score_nutrition, score_recovery
from athlete_hub.domain.models import (
    AthleteScoreSummary,
    NutritionLog,
    RecoveryInputs,
    SampleWindow,
)
from athlete_hub.domain.risk import summarize_athlete
from services.base import day_window, fetch_with_timeout, resolve_now
from services.nutrition_service import NutritionService
from services.sleep_service import SleepReport, SleepService
from services.training_service import TrainingReport, TrainingService
from utils.logger import OperationTimer, get_logger

logger = get_logger(__name__)

RECOVERY_GOAL_KEYS: dict[str, str] = {
    "sleep_goal_hours": "sleep_hours",
    "hrv_goal_ms": "hrv",
    "resting_heart_rate_goal": "resting_heart_rate",
}


@dataclass(frozen=True, slots=True)
class AthleteAssessment:
    """Every intermediate result that fed an athlete's summary."""

    summary: AthleteScoreSummary
    sleep: SleepReport
    training: TrainingReport
    nutrition: NutritionLog
    recovery: RecoveryInputs


class AthleteScoringService:
    """Score one athlete from their own sample source and goal store."""

    def __init__(
        self,
        source: SampleSource,
        goals: GoalStore,
        settings: EngineSettings | None = None,
    ) -> None:
        self._source = source
        self._goals = goals
        self._settings = settings or EngineSettings()
        self.sleep = SleepService(source, self._settings)
        self.training = TrainingService(source, goals, self._settings)
        self.nutrition = NutritionService(source, goals, self._settings)

    async def assess(
        self, athlete_id: str, name: str, now: datetime | None = None
    ) -> AthleteAssessment:
        """Return the full assessment for the day containing ``now``."""

        timer = OperationTimer("summarize_athlete", athlete_id=athlete_id)
        now = resolve_now(now, self._settings.local_timezone)
        today = day_window(now)

        sleep, training, nutrition = await asyncio.gather(
            self.sleep.score_last_night(now, athlete_id=athlete_id),
            self.training.score_day(today, athlete_id=athlete_id),
            self.nutrition.build_log(today, athlete_id=athlete_id),
        )
        recovery = await self._recovery_inputs(sleep, today, athlete_id)

        summary = summarize_athlete(
            athlete_id,
            name,
            training_score=training.score,
            recovery_score=score_recovery(recovery),
            nutrition_score=score_nutrition(nutrition),
        )
        logger.info(
            "Athlete summary: overall %s, risk %s",
            summary.overall_score,
            summary.risk_tier.value,
            extra=timer.extra(
                score=summary.overall_score, tier=summary.risk_tier.value
            ),
        )
        return AthleteAssessment(
            summary=summary,
            sleep=sleep,
            training=training,
            nutrition=nutrition,
            recovery=recovery,
        )

    async def summarize(
        self, athlete_id: str, name: str, now: datetime | None = None
    ) -> AthleteScoreSummary:
        """Return only the roster summary for an athlete."""

        assessment = await self.assess(athlete_id, name, now)
        return assessment.summary

    async def _recovery_inputs(
        self, sleep: SleepReport, window: SampleWindow, athlete_id: str
    ) -> RecoveryInputs:
        timeout = self._settings.fetch_timeout_seconds
        kinds = (MetricKind.HRV, MetricKind.RESTING_HEART_RATE, MetricKind.STRESS)
        hrv, resting, stress = await asyncio.gather(
            *(
                fetch_with_timeout(
                    self._source.fetch_metric(kind, window),
                    default=None,
                    timeout=timeout,
                    op=f"fetch_metric:{kind.value}",
                    athlete_id=athlete_id,
                )
                for kind in kinds
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
                for key in RECOVERY_GOAL_KEYS.values()
            )
        )
        goals = dict(zip(RECOVERY_GOAL_KEYS, goal_values))

        return RecoveryInputs(
            sleep_quality_score=sleep.result.score if sleep.has_data else None,
            sleep_hours=sleep.aggregate.total_sleep if sleep.aggregate else None,
            hrv_ms=hrv,
            resting_heart_rate=resting,
            stress_level=stress,
            **goals,
        )


__all__ = ["AthleteAssessment", "AthleteScoringService", "RECOVERY_GOAL_KEYS"]
