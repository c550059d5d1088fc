"""Process start-up wiring for hosts that embed the scoring services."""

from __future__ import annotations

from athlete_hub.config import EngineSettings, load_settings
from utils.logger import get_logger
from utils.sentry import init_sentry

logger = get_logger(__name__)


def bootstrap() -> EngineSettings:
    """Load settings from the environment and enable error reporting."""

    settings = load_settings()
    if init_sentry():
        logger.info("Sentry successfully initialised")
    else:
        logger.info("Sentry DSN not provided; Sentry disabled")
    logger.info(
        "Scoring engine configured: lookback %sh, timezone %s",
        settings.lookback_hours,
        settings.local_timezone or "system",
    )
    return settings


__all__ = ["bootstrap"]
