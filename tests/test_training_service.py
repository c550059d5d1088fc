from __future__ import annotations

import asyncio
from datetime import datetime
from unittest.mock import Mock

import pytest

import services.training_service as training_service_module
from athlete_hub.application.ports import MetricKind
from athlete_hub.domain.models import SampleWindow, TrainingMetrics
from services.training_service import TrainingService
from tests.fakes import GoalStoreFake, SampleSourceFake

WINDOW = SampleWindow(start=datetime(2024, 3, 2, 0, 0), end=datetime(2024, 3, 2, 20, 0))

GOALS = {"calories": 600, "steps": 10000, "distance": 5, "exercise_minutes": 30}


def test_training_day_is_scored_from_activity_totals(monkeypatch) -> None:
    fake_logger = Mock()
    monkeypatch.setattr(training_service_module, "logger", fake_logger)
    source = SampleSourceFake(
        metrics={
            MetricKind.ACTIVE_CALORIES: 600,
            MetricKind.STEPS: 5000,
            MetricKind.DISTANCE: 8,
            MetricKind.EXERCISE_MINUTES: 15,
        }
    )
    store = GoalStoreFake(GOALS)

    report = asyncio.run(
        TrainingService(source, store).score_day(WINDOW, athlete_id="a-1")
    )

    assert report.metrics == TrainingMetrics(
        calories=600, steps=5000, distance=8, exercise_minutes=15
    )
    assert report.goals == GOALS
    assert report.sub_scores == pytest.approx((25.0, 12.5, 25.0, 12.5))
    assert report.score == 75
    assert sorted(store.requested) == sorted(GOALS)
    extra = fake_logger.info.call_args.kwargs["extra"]
    assert extra["op"] == "score_training"
    assert extra["athlete_id"] == "a-1"
    assert extra["score"] == 75
    assert extra["latency_ms"] >= 0


def test_missing_activity_scores_zero() -> None:
    service = TrainingService(SampleSourceFake(), GoalStoreFake(GOALS))

    report = asyncio.run(service.score_day(WINDOW))

    assert report.metrics == TrainingMetrics()
    assert report.score == 0


def test_failed_metric_counts_as_absent(monkeypatch) -> None:
    monkeypatch.setattr("services.base.capture_exception", lambda *a, **k: None)
    source = SampleSourceFake(
        metrics={MetricKind.STEPS: 10000, MetricKind.DISTANCE: 5},
        metric_errors={MetricKind.ACTIVE_CALORIES: TimeoutError("slow")},
    )

    service = TrainingService(source, GoalStoreFake(GOALS))

    report = asyncio.run(service.score_day(WINDOW))

    assert report.metrics.calories is None
    assert report.score == 50
