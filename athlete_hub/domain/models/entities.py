"""Domain entities shared between scoring functions and services."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Mapping, Optional


class SleepCategory(str, Enum):
    """Sleep analysis category reported by the sample source."""

    AWAKE = "awake"
    LIGHT = "light"
    REM = "rem"
    DEEP = "deep"
    IN_BED = "in_bed"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: str | None) -> "SleepCategory":
        """Map a platform label (``asleepCore``, ``REM Sleep`` ...) to a category.

        >>> SleepCategory.from_label("asleepCore")
        <SleepCategory.LIGHT: 'light'>
        >>> SleepCategory.from_label("Deep Sleep")
        <SleepCategory.DEEP: 'deep'>
        >>> SleepCategory.from_label("napping")
        <SleepCategory.UNKNOWN: 'unknown'>
        """

        if not label:
            return cls.UNKNOWN
        key = "".join(ch for ch in label.lower() if ch.isalpha())
        return _CATEGORY_ALIASES.get(key, cls.UNKNOWN)


_CATEGORY_ALIASES: dict[str, SleepCategory] = {
    "awake": SleepCategory.AWAKE,
    "light": SleepCategory.LIGHT,
    "lightsleep": SleepCategory.LIGHT,
    "core": SleepCategory.LIGHT,
    "asleepcore": SleepCategory.LIGHT,
    "asleepunspecified": SleepCategory.LIGHT,
    "asleep": SleepCategory.LIGHT,
    "rem": SleepCategory.REM,
    "remsleep": SleepCategory.REM,
    "asleeprem": SleepCategory.REM,
    "deep": SleepCategory.DEEP,
    "deepsleep": SleepCategory.DEEP,
    "asleepdeep": SleepCategory.DEEP,
    "inbed": SleepCategory.IN_BED,
}

SLEEP_STAGES: tuple[SleepCategory, ...] = (
    SleepCategory.AWAKE,
    SleepCategory.LIGHT,
    SleepCategory.REM,
    SleepCategory.DEEP,
)
"""Categories always present in :attr:`SleepAggregate.stage_durations`."""


@dataclass(slots=True, frozen=True)
class Sample:
    """Single sleep-analysis interval as produced by the sample source."""

    category: SleepCategory
    start: datetime
    end: datetime

    @property
    def is_valid(self) -> bool:
        return self.end > self.start

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600.0


@dataclass(slots=True, frozen=True)
class SampleWindow:
    """Half-open time range used to query the sample source."""

    start: datetime
    end: datetime

    def overlaps(self, sample: Sample) -> bool:
        return sample.start < self.end and sample.end > self.start


@dataclass(slots=True, frozen=True)
class Night:
    """Samples assigned to one sleep day, plus malformed samples dropped."""

    day: Optional[date]
    samples: tuple[Sample, ...] = ()
    rejected: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def total_hours(self) -> float:
        return sum(sample.duration_hours for sample in self.samples)


@dataclass(slots=True, frozen=True)
class SleepAggregate:
    """Time-in-stage totals (hours) and awakening count for a night."""

    total_sleep: float = 0.0
    awake_duration: float = 0.0
    deep_duration: float = 0.0
    rem_duration: float = 0.0
    light_duration: float = 0.0
    awakenings: int = 0
    stage_durations: Mapping[SleepCategory, float] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return self.total_sleep + self.awake_duration


class SleepTier(str, Enum):
    """Qualitative sleep quality bucket."""

    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(slots=True, frozen=True)
class SleepSubScores:
    """The five weighted components of the sleep composite score."""

    duration: float
    awake_penalty: float
    awakening_penalty: float
    deep_sufficiency: float
    stage_balance: float

    @property
    def total(self) -> float:
        return (
            self.duration
            + self.awake_penalty
            + self.awakening_penalty
            + self.deep_sufficiency
            + self.stage_balance
        )


@dataclass(slots=True, frozen=True)
class SleepScoreResult:
    """Final sleep quality score with its tier.

    ``rejected`` counts malformed samples that were left out of the score.
    """

    score: int
    tier: SleepTier
    sub_scores: Optional[SleepSubScores] = None
    rejected: int = 0


@dataclass(slots=True, frozen=True)
class GoalMetric:
    """Consumed amount against a target; percentage is always derived."""

    consumed: float = 0.0
    goal: Optional[float] = None

    @property
    def has_goal(self) -> bool:
        return self.goal is not None and self.goal > 0

    @property
    def effective_goal(self) -> float:
        """Goal used as divisor; unset or non-positive goals count as 1."""

        return float(self.goal) if self.has_goal else 1.0

    @property
    def percentage(self) -> int:
        """Consumed share of the goal, truncated toward zero.

        >>> GoalMetric(consumed=1500, goal=2000).percentage
        75
        >>> GoalMetric(consumed=3, goal=0).percentage
        300
        """

        return int(self.consumed / self.effective_goal * 100)

    def with_consumed(self, consumed: float) -> "GoalMetric":
        return replace(self, consumed=consumed)

    def with_goal(self, goal: Optional[float]) -> "GoalMetric":
        return replace(self, goal=goal)


@dataclass(slots=True, frozen=True)
class GoalProgressResult:
    """Percentage of a goal plus the weighted points that produced it."""

    percentage: int
    sub_scores: tuple[float, ...] = ()


@dataclass(slots=True, frozen=True)
class TrainingMetrics:
    """Cumulative activity quantities for a day; ``None`` means absent."""

    calories: Optional[float] = None
    steps: Optional[float] = None
    distance: Optional[float] = None
    exercise_minutes: Optional[float] = None


class NutritionMetric(str, Enum):
    """Tracked nutrition targets."""

    CALORIES = "calories"
    PROTEIN = "protein"
    CARBOHYDRATES = "carbohydrates"
    FAT = "fat"
    WATER = "water"
    FIBER = "fiber"


def _empty_nutrition() -> Mapping[NutritionMetric, GoalMetric]:
    return {metric: GoalMetric() for metric in NutritionMetric}


@dataclass(slots=True, frozen=True)
class NutritionLog:
    """Six independent nutrition goal metrics for one day."""

    metrics: Mapping[NutritionMetric, GoalMetric] = field(
        default_factory=_empty_nutrition
    )

    def get(self, metric: NutritionMetric) -> GoalMetric:
        return self.metrics.get(metric, GoalMetric())

    def with_consumed(self, metric: NutritionMetric, consumed: float) -> "NutritionLog":
        """Return a new log with ``metric`` consumption replaced."""

        updated = dict(self.metrics)
        updated[metric] = self.get(metric).with_consumed(consumed)
        return NutritionLog(metrics=updated)

    def with_goal(self, metric: NutritionMetric, goal: Optional[float]) -> "NutritionLog":
        """Return a new log with ``metric`` goal replaced."""

        updated = dict(self.metrics)
        updated[metric] = self.get(metric).with_goal(goal)
        return NutritionLog(metrics=updated)

    def percentages(self) -> dict[NutritionMetric, int]:
        return {metric: self.get(metric).percentage for metric in NutritionMetric}


@dataclass(slots=True, frozen=True)
class RecoveryInputs:
    """Recovery signals and their personal targets."""

    sleep_quality_score: Optional[int] = None
    sleep_hours: Optional[float] = None
    hrv_ms: Optional[float] = None
    resting_heart_rate: Optional[float] = None
    stress_level: Optional[float] = None
    sleep_goal_hours: Optional[float] = None
    hrv_goal_ms: Optional[float] = None
    resting_heart_rate_goal: Optional[float] = None


class RiskTier(str, Enum):
    """Athlete risk classification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(slots=True, frozen=True)
class AthleteScoreSummary:
    """Composite scores for a single athlete on a coach's roster."""

    athlete_id: str
    name: str
    overall_score: int
    training_score: int
    recovery_score: int
    nutrition_score: int
    risk_tier: RiskTier


class AlertSeverity(IntEnum):
    """Alert severity; higher value is more urgent."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(slots=True, frozen=True)
class Alert:
    """Coach-facing alert about one athlete."""

    title: str
    message: str
    severity: AlertSeverity
    subject_name: str


@dataclass(slots=True, frozen=True)
class TeamOverview:
    """Roster-level aggregate for a coach dashboard."""

    team_score: float
    low_risk: int
    at_risk: int
    alert_count: int
    leaderboard: tuple[AthleteScoreSummary, ...] = ()
