"""Tests for calendar bucketing."""

from datetime import date

import pytest

from factories import local_ms
from reports.periods import Timeframe, parse_period_label, period_key


# ---- weekly ----


def test_weekly_label_is_the_sunday_starting_the_week():
    # 2024-07-24 is a Wednesday
    key = period_key(local_ms(2024, 7, 24), Timeframe.WEEKLY)
    assert key.label == "Week of 2024-07-21"
    assert key.start == date(2024, 7, 21)


def test_sunday_starts_its_own_week():
    key = period_key(local_ms(2024, 7, 21, hour=0, minute=5), Timeframe.WEEKLY)
    assert key.label == "Week of 2024-07-21"


def test_saturday_belongs_to_previous_sunday():
    key = period_key(local_ms(2024, 7, 27, hour=23, minute=59), Timeframe.WEEKLY)
    assert key.label == "Week of 2024-07-21"


def test_same_week_same_label_different_week_different_label():
    sunday = period_key(local_ms(2024, 7, 21, hour=1), Timeframe.WEEKLY)
    saturday = period_key(local_ms(2024, 7, 27, hour=22), Timeframe.WEEKLY)
    next_sunday = period_key(local_ms(2024, 7, 28, hour=1), Timeframe.WEEKLY)
    assert sunday.label == saturday.label
    assert next_sunday.label != saturday.label


def test_week_spanning_new_year():
    # 2025-01-01 is a Wednesday; its week starts on 2024-12-29
    key = period_key(local_ms(2025, 1, 1), Timeframe.WEEKLY)
    assert key.label == "Week of 2024-12-29"


# ---- monthly / annual ----


def test_monthly_label():
    key = period_key(local_ms(2024, 7, 31, hour=23), Timeframe.MONTHLY)
    assert key.label == "July 2024"
    assert key.start == date(2024, 7, 1)


def test_monthly_uses_calendar_boundaries():
    end_of_july = period_key(local_ms(2024, 7, 31, hour=23), Timeframe.MONTHLY)
    start_of_august = period_key(local_ms(2024, 8, 1, hour=0, minute=1), Timeframe.MONTHLY)
    assert end_of_july.label != start_of_august.label


def test_annual_label():
    key = period_key(local_ms(2024, 12, 31, hour=23), Timeframe.ANNUAL)
    assert key.label == "2024"
    assert key.start == date(2024, 1, 1)


def test_timeframe_accepts_plain_strings():
    assert Timeframe("monthly") is Timeframe.MONTHLY
    with pytest.raises(ValueError):
        Timeframe("daily")


# ---- parse_period_label ----


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Week of 2024-07-21", date(2024, 7, 21)),
        ("July 2024", date(2024, 7, 1)),
        ("2024", date(2024, 1, 1)),
    ],
)
def test_parse_period_label(label, expected):
    assert parse_period_label(label) == expected


@pytest.mark.parametrize("label", ["", "Week of 2024-13-40", "Smarch 2024", "last week"])
def test_parse_period_label_rejects_unknown(label):
    assert parse_period_label(label) is None


@pytest.mark.parametrize("timeframe", list(Timeframe))
def test_labels_parse_back_to_their_start(timeframe):
    key = period_key(local_ms(2023, 3, 15), timeframe)
    assert parse_period_label(key.label) == key.start
