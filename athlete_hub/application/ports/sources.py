"""Contracts for collaborators that supply raw measurements and targets."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence

from athlete_hub.domain.models import NutritionMetric, Sample, SampleWindow


class MetricKind(str, Enum):
    """Quantities a sample source can report for a window."""

    STEPS = "steps"
    ACTIVE_CALORIES = "active_calories"
    DISTANCE = "distance"
    EXERCISE_MINUTES = "exercise_minutes"
    CALORIES_CONSUMED = "calories_consumed"
    PROTEIN = "protein"
    CARBOHYDRATES = "carbohydrates"
    FAT = "fat"
    WATER = "water"
    FIBER = "fiber"
    HRV = "hrv"
    RESTING_HEART_RATE = "resting_heart_rate"
    STRESS = "stress"


NUTRITION_METRIC_KINDS: dict[NutritionMetric, MetricKind] = {
    NutritionMetric.CALORIES: MetricKind.CALORIES_CONSUMED,
    NutritionMetric.PROTEIN: MetricKind.PROTEIN,
    NutritionMetric.CARBOHYDRATES: MetricKind.CARBOHYDRATES,
    NutritionMetric.FAT: MetricKind.FAT,
    NutritionMetric.WATER: MetricKind.WATER,
    NutritionMetric.FIBER: MetricKind.FIBER,
}


class SampleSource(Protocol):
    """Supplies already-acquired samples from a health platform."""

    async def fetch_sleep_samples(self, window: SampleWindow) -> Sequence[Sample]:
        """Return sleep intervals overlapping ``window`` in any order."""

    async def fetch_metric(
        self, kind: MetricKind, window: SampleWindow
    ) -> Optional[float]:
        """Return the cumulative or latest value of ``kind``; ``None`` if absent."""


class GoalStore(Protocol):
    """Provides an athlete's personal targets."""

    async def get_goal(self, metric_name: str) -> Optional[float]:
        """Return the goal for ``metric_name`` or ``None`` when unset."""
