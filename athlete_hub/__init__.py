"""Athlete Hub health and performance scoring engine.

The package exposes the pure scoring entry points; async services that
talk to sample sources live in :mod:`services`.
"""

from athlete_hub.domain.goals import progress as score_goal_progress
from athlete_hub.domain.goals import score_training
from athlete_hub.domain.risk import classify_risk, generate_alerts
from athlete_hub.domain.sleep import score_sleep

__all__ = [
    "classify_risk",
    "generate_alerts",
    "score_goal_progress",
    "score_sleep",
    "score_training",
]
