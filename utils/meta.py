"""Metadata constants for Athlete Hub."""

from __future__ import annotations

from typing import Final

ENGINE_VERSION: Final[str] = "0.1.0"
"""Current engine version used for telemetry and observability tags."""
