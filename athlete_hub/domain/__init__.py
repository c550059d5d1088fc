"""Domain layer with pure scoring functions and entities."""

from . import goals, models, risk, sleep

__all__ = ["goals", "models", "risk", "sleep"]
