"""Ports define the contracts between the scoring services and adapters."""

from .services import AlertNotifier
from .sources import NUTRITION_METRIC_KINDS, GoalStore, MetricKind, SampleSource

__all__ = [
    "AlertNotifier",
    "GoalStore",
    "MetricKind",
    "NUTRITION_METRIC_KINDS",
    "SampleSource",
]
