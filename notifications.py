"""Telegram delivery of roster alerts to subscribed coach chats.

Alerts are rendered as one HTML message per chat. A failed delivery is logged
and reported to Sentry; it never interrupts delivery to the other chats.
"""

from __future__ import annotations

import asyncio
import html
from typing import Sequence

from aiogram import Bot

from athlete_hub.config import EngineSettings
from athlete_hub.domain.models import Alert, AlertSeverity
from utils.logger import OperationTimer, get_logger
from utils.sentry import capture_exception

logger = get_logger(__name__)

SEVERITY_MARKERS: dict[AlertSeverity, str] = {
    AlertSeverity.HIGH: "🛑",
    AlertSeverity.MEDIUM: "⚠️",
    AlertSeverity.LOW: "ℹ️",
}


def build_alert_message(alerts: Sequence[Alert]) -> str:
    """Compose an HTML message listing ``alerts`` in the given order."""

    lines = [f"<b>Roster alerts ({len(alerts)})</b>"]
    for alert in alerts:
        marker = SEVERITY_MARKERS.get(alert.severity, "•")
        lines.append(
            "{marker} <b>{title}</b>: {message}".format(
                marker=marker,
                title=html.escape(alert.title),
                message=html.escape(alert.message),
            )
        )
    return "\n".join(lines)


class CoachAlertNotifier:
    """Deliver roster alerts to coach chats through Telegram."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot
        self._subscribers: set[int] = set()
        self._lock = asyncio.Lock()

    async def subscribe(self, chat_id: int) -> bool:
        """Subscribe chat to receive roster alerts."""

        async with self._lock:
            if chat_id in self._subscribers:
                return False
            self._subscribers.add(chat_id)
            logger.info(
                "Coach chat subscribed to alerts",
                extra={"op": "subscribe", "chat_id": chat_id},
            )
            return True

    async def unsubscribe(self, chat_id: int) -> bool:
        """Remove chat from the alert list."""

        async with self._lock:
            if chat_id not in self._subscribers:
                return False
            self._subscribers.remove(chat_id)
            logger.info(
                "Coach chat unsubscribed from alerts",
                extra={"op": "unsubscribe", "chat_id": chat_id},
            )
            return True

    async def is_subscribed(self, chat_id: int) -> bool:
        """Return True if chat receives roster alerts."""

        async with self._lock:
            return chat_id in self._subscribers

    async def send_alerts(self, chat_id: int, alerts: Sequence[Alert]) -> bool:
        """Send ``alerts`` to one chat; delivery errors are logged, not raised."""

        if not alerts:
            return True
        timer = OperationTimer("send_alerts")
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=build_alert_message(alerts),
                parse_mode="HTML",
            )
        except Exception as exc:
            logger.warning(
                "Failed to deliver roster alerts: %s",
                exc,
                exc_info=True,
                extra=timer.extra(chat_id=chat_id),
            )
            capture_exception(exc)
            return False
        logger.info(
            "Delivered %s roster alerts",
            len(alerts),
            extra=timer.extra(chat_id=chat_id),
        )
        return True

    async def broadcast_alerts(self, alerts: Sequence[Alert]) -> int:
        """Send ``alerts`` to every subscriber; return successful deliveries."""

        async with self._lock:
            recipients = sorted(self._subscribers)
        delivered = 0
        for chat_id in recipients:
            if await self.send_alerts(chat_id, alerts):
                delivered += 1
        return delivered


async def create_notifier(settings: EngineSettings) -> CoachAlertNotifier:
    """Build a notifier for the configured bot with coach chats subscribed."""

    notifier = CoachAlertNotifier(Bot(token=settings.require_bot_token()))
    for chat_id in settings.coach_chat_ids:
        await notifier.subscribe(chat_id)
    return notifier
