"""Roster risk assessment and coach alerting."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from athlete_hub.application.ports import AlertNotifier
from athlete_hub.domain.models import Alert, AthleteScoreSummary, TeamOverview
from athlete_hub.domain.risk import generate_alerts, team_overview
from services.athlete_scoring_service import AthleteScoringService
from utils.logger import OperationTimer, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RosterEntry:
    """Athlete on a coach's roster with the service that scores them."""

    athlete_id: str
    name: str
    scorer: AthleteScoringService


@dataclass(frozen=True, slots=True)
class TeamRiskReport:
    """Summaries, sorted alerts and the overview for one roster."""

    summaries: tuple[AthleteScoreSummary, ...]
    alerts: tuple[Alert, ...]
    overview: TeamOverview


def alert_log_entry(alert: Alert) -> dict[str, object]:
    """Return the loggable fields of an alert; names are masked on output."""

    return {
        "title": alert.title,
        "severity": alert.severity.name,
        "subject_name": alert.subject_name,
        "message": alert.message,
    }

class TeamRiskService:
    """Build roster risk reports and forward alerts to coaches."""

    def __init__(self, notifier: AlertNotifier | None = None) -> None:
        self._notifier = notifier

    async def summarize_roster(
        self, entries: Sequence[RosterEntry], now: datetime | None = None
    ) -> list[AthleteScoreSummary]:
        """Score every athlete concurrently; each run is independent."""

        return list(
            await asyncio.gather(
                *(
                    entry.scorer.summarize(entry.athlete_id, entry.name, now)
                    for entry in entries
                )
            )
        )

    def assess(self, roster: Sequence[AthleteScoreSummary]) -> TeamRiskReport:
        """Return alerts and overview for already computed summaries."""

        timer = OperationTimer("assess_roster")
        alerts = generate_alerts(roster)
        overview = team_overview(roster)
        logger.info(
            "Roster assessed: %s athletes, %s at risk, %s alerts",
            len(roster),
            overview.at_risk,
            len(alerts),
            extra=timer.extra(alerts=[alert_log_entry(alert) for alert in alerts]),
        )
        return TeamRiskReport(
            summaries=tuple(roster),
            alerts=tuple(alerts),
            overview=overview,
        )

    async def notify_coaches(
        self, report: TeamRiskReport, chat_ids: Sequence[int]
    ) -> int:
        """Send the report's alerts to every chat; return successful deliveries."""

        if not report.alerts or not chat_ids:
            return 0
        if self._notifier is None:
            raise RuntimeError("TeamRiskService was created without an alert notifier")

        timer = OperationTimer("notify_coaches")
        delivered = 0
        for chat_id in chat_ids:
            if await self._notifier.send_alerts(chat_id, report.alerts):
                delivered += 1
        if delivered < len(chat_ids):
            logger.warning(
                "Delivered roster alerts to %s of %s coach chats",
                delivered,
                len(chat_ids),
                extra=timer.extra(),
            )
        return delivered


__all__ = ["RosterEntry", "TeamRiskReport", "TeamRiskService", "alert_log_entry"]
