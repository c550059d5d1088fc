"""Factories for domain models used in tests."""

from .domain import AthleteScoreSummaryFactory, SampleFactory, build_night

__all__ = [
    "AthleteScoreSummaryFactory",
    "SampleFactory",
    "build_night",
]
