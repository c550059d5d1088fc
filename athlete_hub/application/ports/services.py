"""Service contracts for outbound integrations."""

from __future__ import annotations

from typing import Protocol, Sequence

from athlete_hub.domain.models import Alert


class AlertNotifier(Protocol):
    """Delivers roster alerts to a coach."""

    async def send_alerts(self, chat_id: int, alerts: Sequence[Alert]) -> bool:
        """Send ``alerts`` to ``chat_id``; return ``False`` if delivery failed."""
