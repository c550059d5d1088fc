"""Configuration helpers for the scoring services."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

DEFAULT_LOOKBACK_HOURS = 24.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


def _parse_positive_float(data: Mapping[str, str], key: str, default: float) -> float:
    raw = (data.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{key} must be positive, got '{raw}'.")
    return value


def _parse_chat_ids(raw: str | None) -> tuple[int, ...]:
    if not raw:
        return ()
    chat_ids: list[int] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            chat_ids.append(int(chunk))
        except ValueError as exc:
            raise ValueError(
                f"COACH_CHAT_IDS must contain integers separated by commas, got '{chunk}'."
            ) from exc
    return tuple(chat_ids)


@dataclass(slots=True)
class EngineSettings:
    """Strongly-typed settings for the scoring services."""

    lookback_hours: float = DEFAULT_LOOKBACK_HOURS
    local_timezone: ZoneInfo | None = None
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    bot_token: str | None = None
    coach_chat_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        """Build settings instance from environment variables."""

        data = environ if environ is not None else os.environ

        tz_name = (data.get("LOCAL_TIMEZONE") or "").strip()
        local_timezone: ZoneInfo | None = None
        if tz_name:
            try:
                local_timezone = ZoneInfo(tz_name)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown LOCAL_TIMEZONE '{tz_name}'.") from exc

        return cls(
            lookback_hours=_parse_positive_float(
                data, "SLEEP_LOOKBACK_HOURS", DEFAULT_LOOKBACK_HOURS
            ),
            local_timezone=local_timezone,
            fetch_timeout_seconds=_parse_positive_float(
                data, "FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT_SECONDS
            ),
            bot_token=(data.get("BOT_TOKEN") or "").strip() or None,
            coach_chat_ids=_parse_chat_ids(data.get("COACH_CHAT_IDS")),
        )

    def require_bot_token(self) -> str:
        """Return Telegram bot token ensuring it is provided."""

        if not self.bot_token:
            raise RuntimeError(
                "BOT_TOKEN environment variable must be set to deliver coach alerts."
            )
        return self.bot_token


def load_settings() -> EngineSettings:
    """Load ``.env`` into the process environment and build settings."""

    load_dotenv()
    return EngineSettings.from_env()


__all__ = ["EngineSettings", "load_settings"]
