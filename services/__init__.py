"""Async services wiring external collaborators to the scoring domain."""

from __future__ import annotations

from .athlete_scoring_service import AthleteAssessment, AthleteScoringService
from .nutrition_service import NutritionService
from .sleep_service import SleepReport, SleepService
from .team_risk_service import RosterEntry, TeamRiskReport, TeamRiskService
from .training_service import TrainingReport, TrainingService

__all__ = [
    "AthleteAssessment",
    "AthleteScoringService",
    "NutritionService",
    "RosterEntry",
    "SleepReport",
    "SleepService",
    "TeamRiskReport",
    "TeamRiskService",
    "TrainingReport",
    "TrainingService",
]
