"""Tests for night selection in :mod:`athlete_hub.domain.sleep`."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from zoneinfo import ZoneInfo

from athlete_hub.domain.models import Sample, SampleWindow, SleepCategory
from athlete_hub.domain.sleep import (
    align_moment,
    group_by_day,
    lookback_window,
    nightly_scores,
    partition_samples,
    samples_in_window,
    select_night,
    sleep_day,
)
from tests.factories import SampleFactory, build_night


def _short_and_long_nights() -> tuple[list[Sample], list[Sample]]:
    five_hours = build_night(
        datetime(2024, 3, 1, 1, 0),
        [(SleepCategory.LIGHT, 3.0), (SleepCategory.DEEP, 2.0)],
    )
    seven_hours = build_night(
        datetime(2024, 3, 1, 23, 0),
        [
            (SleepCategory.LIGHT, 2.0),
            (SleepCategory.DEEP, 1.5),
            (SleepCategory.REM, 1.5),
            (SleepCategory.LIGHT, 2.0),
        ],
    )
    return five_hours, seven_hours


def test_longest_night_wins_regardless_of_input_order() -> None:
    short, long_ = _short_and_long_nights()

    forward = select_night(short + long_)
    backward = select_night(list(reversed(long_)) + short)

    assert forward.day == backward.day == date(2024, 3, 2)
    assert forward.total_hours == pytest.approx(7.0)
    assert set(forward.samples) == set(long_)
    assert set(backward.samples) == set(long_)


def test_samples_are_grouped_by_end_day() -> None:
    crossing = SampleFactory.build(
        start=datetime(2024, 3, 1, 22, 0), end=datetime(2024, 3, 2, 2, 0)
    )
    same_evening = SampleFactory.build(
        start=datetime(2024, 3, 1, 20, 0), end=datetime(2024, 3, 1, 21, 0)
    )

    night = select_night([same_evening, crossing])

    assert night.day == date(2024, 3, 2)
    assert night.samples == (crossing,)


def test_empty_input_is_empty_selection() -> None:
    night = select_night([])

    assert night.is_empty
    assert night.day is None
    assert night.rejected == 0


def test_malformed_samples_are_counted_not_selected() -> None:
    good = SampleFactory.build(
        start=datetime(2024, 3, 1, 23, 0), end=datetime(2024, 3, 2, 6, 0)
    )
    zero_length = SampleFactory.build(
        start=datetime(2024, 3, 2, 1, 0), end=datetime(2024, 3, 2, 1, 0)
    )
    reversed_sample = SampleFactory.build(
        start=datetime(2024, 3, 2, 3, 0), end=datetime(2024, 3, 2, 2, 0)
    )

    night = select_night([zero_length, good, reversed_sample])

    assert night.samples == (good,)
    assert night.rejected == 2


def test_only_malformed_samples_yield_no_data() -> None:
    bad = SampleFactory.build(
        start=datetime(2024, 3, 2, 3, 0), end=datetime(2024, 3, 2, 2, 0)
    )

    night = select_night([bad])

    assert night.is_empty
    assert night.rejected == 1


def test_partition_samples_keeps_order() -> None:
    first = SampleFactory.build(
        start=datetime(2024, 3, 1, 23, 0), end=datetime(2024, 3, 2, 0, 0)
    )
    bad = SampleFactory.build(
        start=datetime(2024, 3, 2, 0, 0), end=datetime(2024, 3, 2, 0, 0)
    )
    second = SampleFactory.build(
        start=datetime(2024, 3, 2, 0, 0), end=datetime(2024, 3, 2, 1, 0)
    )

    assert partition_samples([first, bad, second]) == ((first, second), 1)


def test_sleep_day_uses_local_calendar_for_aware_timestamps() -> None:
    moment = datetime(2024, 3, 2, 3, 0, tzinfo=timezone.utc)

    assert sleep_day(moment, ZoneInfo("America/New_York")) == date(2024, 3, 1)
    assert sleep_day(moment, ZoneInfo("Europe/Kyiv")) == date(2024, 3, 2)
    assert sleep_day(datetime(2024, 3, 2, 3, 0)) == date(2024, 3, 2)


def test_select_night_honours_time_zone() -> None:
    utc = timezone.utc
    evening = SampleFactory.build(
        start=datetime(2024, 3, 2, 0, 0, tzinfo=utc),
        end=datetime(2024, 3, 2, 3, 0, tzinfo=utc),
    )
    morning = SampleFactory.build(
        start=datetime(2024, 3, 2, 6, 0, tzinfo=utc),
        end=datetime(2024, 3, 2, 8, 0, tzinfo=utc),
    )

    in_new_york = select_night([evening, morning], tz=ZoneInfo("America/New_York"))
    in_utc = select_night([evening, morning], tz=utc)

    assert in_new_york.day == date(2024, 3, 1)
    assert in_new_york.samples == (evening,)
    assert in_utc.day == date(2024, 3, 2)
    assert len(in_utc.samples) == 2


def test_lookback_window_and_overlap_filter() -> None:
    now = datetime(2024, 3, 2, 9, 0)
    window = lookback_window(now, 24)
    inside = SampleFactory.build(
        start=datetime(2024, 3, 1, 23, 0), end=datetime(2024, 3, 2, 6, 0)
    )
    straddling = SampleFactory.build(
        start=datetime(2024, 3, 1, 8, 0), end=datetime(2024, 3, 1, 10, 0)
    )
    too_old = SampleFactory.build(
        start=datetime(2024, 2, 29, 23, 0), end=datetime(2024, 3, 1, 7, 0)
    )

    assert window == SampleWindow(start=now - timedelta(hours=24), end=now)
    assert samples_in_window([inside, straddling, too_old], window) == (
        inside,
        straddling,
    )


def test_lookback_window_rejects_non_positive_hours() -> None:
    with pytest.raises(ValueError):
        lookback_window(datetime(2024, 3, 2, 9, 0), 0)


def test_align_moment_follows_reference_awareness() -> None:
    kyiv = ZoneInfo("Europe/Kyiv")
    aware_ref = datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)
    naive_ref = datetime(2024, 3, 2, 9, 0)

    assert align_moment(datetime(2024, 3, 2, 6, 0), aware_ref, kyiv) == datetime(
        2024, 3, 2, 4, 0, tzinfo=timezone.utc
    )
    assert align_moment(
        datetime(2024, 3, 2, 4, 0, tzinfo=timezone.utc), naive_ref, kyiv
    ) == datetime(2024, 3, 2, 6, 0)
    assert align_moment(naive_ref, naive_ref, kyiv) is naive_ref
    assert align_moment(datetime(2024, 3, 2, 6, 0), aware_ref).tzinfo is not None


def test_mixed_awareness_samples_are_filtered_without_error() -> None:
    utc = timezone.utc
    window = lookback_window(datetime(2024, 3, 2, 9, 0, tzinfo=utc), 24)
    naive = Sample(
        SleepCategory.LIGHT, datetime(2024, 3, 1, 23, 0), datetime(2024, 3, 2, 3, 0)
    )
    aware = Sample(
        SleepCategory.DEEP,
        datetime(2024, 3, 2, 3, 0, tzinfo=utc),
        datetime(2024, 3, 2, 5, 0, tzinfo=utc),
    )
    stale = Sample(
        SleepCategory.LIGHT, datetime(2024, 2, 28, 23, 0), datetime(2024, 2, 29, 6, 0)
    )

    kept = samples_in_window([naive, aware, stale], window, tz=utc)

    assert kept == (
        Sample(
            SleepCategory.LIGHT,
            datetime(2024, 3, 1, 23, 0, tzinfo=utc),
            datetime(2024, 3, 2, 3, 0, tzinfo=utc),
        ),
        aware,
    )
    assert kept[1] is aware
    assert select_night(kept, tz=utc).total_hours == pytest.approx(6.0)


def test_group_by_day_and_nightly_scores(scored_night) -> None:
    nap = SampleFactory.build(
        start=datetime(2024, 2, 28, 14, 0), end=datetime(2024, 2, 28, 15, 0)
    )
    broken = SampleFactory.build(
        start=datetime(2024, 2, 27, 3, 0), end=datetime(2024, 2, 27, 2, 0)
    )

    groups = group_by_day([nap, *scored_night])
    scores = nightly_scores([nap, broken, *scored_night])

    assert sorted(groups) == [date(2024, 2, 28), date(2024, 3, 2)]
    assert groups[date(2024, 2, 28)] == [nap]
    assert set(scores) == {date(2024, 2, 28), date(2024, 3, 2)}
    assert scores[date(2024, 3, 2)] == 97
    assert 0 < scores[date(2024, 2, 28)] < 97
