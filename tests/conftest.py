from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from athlete_hub.domain.models import Sample, SleepCategory
from tests.factories import build_night

os.environ.setdefault("BOT_TOKEN", "123456:TESTTOKEN")


@pytest.fixture
def night_start() -> datetime:
    return datetime(2024, 3, 1, 22, 30)


@pytest.fixture
def scored_night(night_start: datetime) -> list[Sample]:
    """Eight samples: 4h light, 2h deep, 2h REM, 30m awake, one awakening.

    Every sample ends on 2024-03-02, so they form a single night.
    """

    return build_night(
        night_start,
        [
            (SleepCategory.LIGHT, 1.5),
            (SleepCategory.DEEP, 1.0),
            (SleepCategory.REM, 1.0),
            (SleepCategory.LIGHT, 1.0),
            (SleepCategory.AWAKE, 0.5),
            (SleepCategory.LIGHT, 1.5),
            (SleepCategory.DEEP, 1.0),
            (SleepCategory.REM, 1.0),
        ],
    )


@pytest.fixture
def morning_after() -> datetime:
    return datetime(2024, 3, 2, 9, 0)
