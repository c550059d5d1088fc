"""In-memory fakes for external integrations used in tests."""

from .sources import GoalStoreFake, SampleSourceFake
from .telegram import AlertNotifierFake, BotFake, TelegramMessage

__all__ = [
    "AlertNotifierFake",
    "BotFake",
    "GoalStoreFake",
    "SampleSourceFake",
    "TelegramMessage",
]
