"""Domain data transfer objects used across the engine."""

from .entities import (
    SLEEP_STAGES,
    Alert,
    AlertSeverity,
    AthleteScoreSummary,
    GoalMetric,
    GoalProgressResult,
    Night,
    NutritionLog,
    NutritionMetric,
    RecoveryInputs,
    RiskTier,
    Sample,
    SampleWindow,
    SleepAggregate,
    SleepCategory,
    SleepScoreResult,
    SleepSubScores,
    SleepTier,
    TeamOverview,
    TrainingMetrics,
)

__all__ = [
    "SLEEP_STAGES",
    "Alert",
    "AlertSeverity",
    "AthleteScoreSummary",
    "GoalMetric",
    "GoalProgressResult",
    "Night",
    "NutritionLog",
    "NutritionMetric",
    "RecoveryInputs",
    "RiskTier",
    "Sample",
    "SampleWindow",
    "SleepAggregate",
    "SleepCategory",
    "SleepScoreResult",
    "SleepSubScores",
    "SleepTier",
    "TeamOverview",
    "TrainingMetrics",
]
