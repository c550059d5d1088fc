"""Score the most recent night of sleep from a sample source."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime

from athlete_hub.application.ports import SampleSource
from athlete_hub.config import EngineSettings
from athlete_hub.domain.goals import fill_last_seven
from athlete_hub.domain.models import (
    Night,
    Sample,
    SampleWindow,
    SleepAggregate,
    SleepScoreResult,
    SleepTier,
)
from athlete_hub.domain.sleep import (
    aggregate_night,
    lookback_window,
    nightly_scores,
    partition_samples,
    samples_in_window,
    score_aggregate,
    select_night,
    sleep_day,
)
from services.base import fetch_with_timeout, resolve_now
from utils import fmt_hours
from utils.logger import OperationTimer, get_logger

logger = get_logger(__name__)

HISTORY_DAYS = 7


@dataclass(frozen=True, slots=True)
class SleepReport:
    """Selected night with its aggregates and final score."""

    window: SampleWindow
    night: Night
    aggregate: SleepAggregate | None
    result: SleepScoreResult

    @property
    def has_data(self) -> bool:
        return not self.night.is_empty

    @property
    def rejected_samples(self) -> int:
        return self.night.rejected


class SleepService:
    """Fetch sleep samples for the lookback window and score them."""

    def __init__(
        self,
        source: SampleSource,
        settings: EngineSettings | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or EngineSettings()

    async def score_last_night(
        self,
        now: datetime | None = None,
        *,
        athlete_id: str | None = None,
    ) -> SleepReport:
        """Return the report for the most recent completed sleep period."""

        timer = OperationTimer("score_sleep", athlete_id=athlete_id)
        now = resolve_now(now, self._settings.local_timezone)
        window = lookback_window(now, self._settings.lookback_hours)
        samples = await self._fetch(window, athlete_id)
        report = self.build_report(samples, window)

        if report.rejected_samples:
            logger.warning(
                "Excluded %s malformed sleep samples",
                report.rejected_samples,
                extra=timer.extra(rejected=report.rejected_samples),
            )
        logger.info(
            "Sleep scored: %s asleep from %s samples",
            fmt_hours(report.aggregate.total_sleep if report.aggregate else 0.0),
            len(report.night.samples),
            extra=timer.extra(
                score=report.result.score, tier=report.result.tier.value
            ),
        )
        return report

    async def score_last_week(
        self,
        now: datetime | None = None,
        *,
        athlete_id: str | None = None,
    ) -> tuple[tuple[date, int], ...]:
        """Return one sleep score per day for the week ending today.

        Days without a recorded night score ``0``.
        """

        timer = OperationTimer("score_sleep_history", athlete_id=athlete_id)
        tz = self._settings.local_timezone
        now = resolve_now(now, tz)
        window = lookback_window(now, HISTORY_DAYS * 24)
        valid, rejected = partition_samples(await self._fetch(window, athlete_id))
        scores = nightly_scores(samples_in_window(valid, window, tz=tz), tz=tz)
        history = fill_last_seven(scores, sleep_day(now, tz))
        logger.info(
            "Sleep history scored for %s nights",
            len(scores),
            extra=timer.extra(rejected=rejected),
        )
        return history

    def build_report(self, samples: list[Sample], window: SampleWindow) -> SleepReport:
        """Score already-materialised samples; no I/O happens here."""

        tz = self._settings.local_timezone
        valid, rejected = partition_samples(samples)
        night = select_night(samples_in_window(valid, window, tz=tz), tz=tz)
        night = replace(night, rejected=night.rejected + rejected)

        if night.is_empty:
            return SleepReport(
                window=window,
                night=night,
                aggregate=None,
                result=SleepScoreResult(
                    score=0, tier=SleepTier.POOR, rejected=night.rejected
                ),
            )

        aggregate = aggregate_night(night.samples)
        return SleepReport(
            window=window,
            night=night,
            aggregate=aggregate,
            result=replace(score_aggregate(aggregate), rejected=night.rejected),
        )

    async def _fetch(self, window: SampleWindow, athlete_id: str | None) -> list[Sample]:
        return list(
            await fetch_with_timeout(
                self._source.fetch_sleep_samples(window),
                default=(),
                timeout=self._settings.fetch_timeout_seconds,
                op="fetch_sleep_samples",
                athlete_id=athlete_id,
            )
        )


__all__ = ["HISTORY_DAYS", "SleepReport", "SleepService"]
