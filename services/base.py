"""Shared helpers for services that talk to external collaborators."""

from __future__ import annotations

import asyncio
from datetime import datetime, time, tzinfo
from typing import Awaitable, TypeVar

from athlete_hub.domain.models import SampleWindow
from utils.logger import get_logger
from utils.sentry import capture_exception

logger = get_logger(__name__)

T = TypeVar("T")


async def fetch_with_timeout(
    awaitable: Awaitable[T],
    *,
    default: T,
    timeout: float,
    op: str,
    athlete_id: str | None = None,
) -> T:
    """Await a collaborator call, falling back to ``default`` on failure.

    Timed-out or failing fetches are treated as missing data: the warning is
    logged, the exception is reported to Sentry and scoring continues with
    fewer inputs.
    """

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "Collaborator call %s timed out after %.1fs",
            op,
            timeout,
            extra={"athlete_id": athlete_id, "op": op},
        )
    except Exception as exc:
        logger.warning(
            "Collaborator call %s failed: %s",
            op,
            exc,
            exc_info=True,
            extra={"athlete_id": athlete_id, "op": op},
        )
        capture_exception(exc, athlete_id=athlete_id)
    return default


def resolve_now(now: datetime | None, tz: tzinfo | None) -> datetime:
    """Return ``now`` or the current aware time in ``tz`` (system local if unset)."""

    if now is not None:
        return now
    return datetime.now().astimezone(tz)


def day_window(now: datetime) -> SampleWindow:
    """Return the window from local midnight of ``now`` up to ``now``."""

    midnight = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    return SampleWindow(start=midnight, end=now)


__all__ = ["day_window", "fetch_with_timeout", "resolve_now"]
