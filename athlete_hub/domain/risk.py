"""Risk tiering and alert generation for a coach's roster."""

from __future__ import annotations

from statistics import fmean
from typing import Iterable, Sequence

from athlete_hub.domain.models import (
    Alert,
    AlertSeverity,
    AthleteScoreSummary,
    RiskTier,
    TeamOverview,
)

LOW_RISK_OVERALL = 70
LOW_RISK_RECOVERY = 60
MEDIUM_RISK_OVERALL = 50
MEDIUM_RISK_RECOVERY = 40

POOR_RECOVERY_THRESHOLD = 30
LOW_TRAINING_THRESHOLD = 40


def classify_risk(
    training_score: int, recovery_score: int, nutrition_score: int
) -> tuple[int, RiskTier]:
    """Return the overall score and risk tier for one athlete.

    ``overall`` is the floor of the mean of the three scores.

    >>> classify_risk(80, 65, 50)
    (65, <RiskTier.MEDIUM: 'medium'>)
    >>> classify_risk(90, 70, 80)
    (80, <RiskTier.LOW: 'low'>)
    >>> classify_risk(20, 10, 30)
    (20, <RiskTier.HIGH: 'high'>)
    """

    overall = (int(training_score) + int(recovery_score) + int(nutrition_score)) // 3
    if overall >= LOW_RISK_OVERALL and recovery_score >= LOW_RISK_RECOVERY:
        return overall, RiskTier.LOW
    if overall >= MEDIUM_RISK_OVERALL or recovery_score >= MEDIUM_RISK_RECOVERY:
        return overall, RiskTier.MEDIUM
    return overall, RiskTier.HIGH


def summarize_athlete(
    athlete_id: str,
    name: str,
    training_score: int,
    recovery_score: int,
    nutrition_score: int,
) -> AthleteScoreSummary:
    """Build a fresh summary; summaries are replaced, never updated."""

    overall, tier = classify_risk(training_score, recovery_score, nutrition_score)
    return AthleteScoreSummary(
        athlete_id=athlete_id,
        name=name,
        overall_score=overall,
        training_score=int(training_score),
        recovery_score=int(recovery_score),
        nutrition_score=int(nutrition_score),
        risk_tier=tier,
    )


def alerts_for(summary: AthleteScoreSummary) -> list[Alert]:
    """Return zero or more alerts raised by a single athlete."""

    name = summary.name or "Unknown"
    alerts: list[Alert] = []
    if summary.risk_tier is RiskTier.HIGH:
        alerts.append(
            Alert(
                title="High Risk Alert",
                message=f"{name} shows concerning metrics",
                severity=AlertSeverity.HIGH,
                subject_name=name,
            )
        )
    if summary.recovery_score < POOR_RECOVERY_THRESHOLD:
        alerts.append(
            Alert(
                title="Poor Recovery",
                message=f"{name} has low recovery score ({summary.recovery_score})",
                severity=AlertSeverity.MEDIUM,
                subject_name=name,
            )
        )
    if summary.training_score < LOW_TRAINING_THRESHOLD:
        alerts.append(
            Alert(
                title="Low Training Performance",
                message=f"{name} is underperforming in training",
                severity=AlertSeverity.MEDIUM,
                subject_name=name,
            )
        )
    return alerts


def generate_alerts(roster: Iterable[AthleteScoreSummary]) -> list[Alert]:
    """Return alerts for the roster, most severe first.

    Alerts of equal severity are ordered by athlete name; alerts for the
    same athlete keep the order they were raised in.
    """

    alerts = [alert for summary in roster for alert in alerts_for(summary)]
    return sorted(alerts, key=lambda alert: (-int(alert.severity), alert.subject_name))


def team_overview(roster: Sequence[AthleteScoreSummary]) -> TeamOverview:
    """Aggregate roster scores into a dashboard overview."""

    scores = [summary.overall_score for summary in roster]
    return TeamOverview(
        team_score=fmean(scores) if scores else 0.0,
        low_risk=sum(1 for summary in roster if summary.risk_tier is RiskTier.LOW),
        at_risk=sum(1 for summary in roster if summary.risk_tier is not RiskTier.LOW),
        alert_count=len(generate_alerts(roster)),
        leaderboard=tuple(
            sorted(roster, key=lambda summary: summary.overall_score, reverse=True)
        ),
    )


__all__ = [
    "alerts_for",
    "classify_risk",
    "generate_alerts",
    "summarize_athlete",
    "team_overview",
]
