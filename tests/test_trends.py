from datetime import timedelta

import pytest

from conftest import NOW, make_record
from pomodoro_api.analytics import completion_trend, percent_change


def test_no_previous_week_means_full_increase():
    trend = completion_trend([make_record(days_ago=d) for d in (0, 1, 2)], NOW)

    assert trend.current_week == 3
    assert trend.previous_week == 0
    assert trend.percent_change == 100


def test_no_activity_means_no_change():
    trend = completion_trend([], NOW)
    assert (trend.current_week, trend.previous_week, trend.percent_change) == (0, 0, 0)


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [
        (3, 0, 100),
        (0, 0, 0),
        (5, 4, 25.0),
        (4, 4, 0.0),
        (0, 4, -100.0),
        (1, 3, -66.67),
        (2, 3, -33.33),
        (7, 3, 133.33),
    ],
)
def test_percent_change(current, previous, expected):
    assert percent_change(current, previous) == expected


def test_week_boundaries():
    sessions = [
        make_record(start_time=NOW),  # current, closed upper bound
        make_record(start_time=NOW - timedelta(days=7)),  # current, inclusive start
        make_record(start_time=NOW - timedelta(days=7, seconds=1)),  # previous
        make_record(start_time=NOW - timedelta(days=14)),  # previous, inclusive start
        make_record(start_time=NOW - timedelta(days=14, seconds=1)),  # too old
        make_record(start_time=NOW + timedelta(minutes=5)),  # after now
    ]

    trend = completion_trend(sessions, NOW)

    assert trend.current_week == 2
    assert trend.previous_week == 2
    assert trend.percent_change == 0


def test_only_completed_sessions_are_counted():
    sessions = [
        make_record(days_ago=1, completed=False),
        make_record(days_ago=2),
        make_record(days_ago=9),
        make_record(days_ago=10, completed=False),
    ]

    trend = completion_trend(sessions, NOW)

    assert trend.current_week == 1
    assert trend.previous_week == 1


def test_malformed_records_are_skipped():
    sessions = [make_record(start_time="yesterday"), make_record(days_ago=1)]
    assert completion_trend(sessions, NOW).current_week == 1
