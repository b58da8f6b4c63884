from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import NOW, make_record
from pomodoro_api.analytics import activity_heatmap


@pytest.mark.parametrize("days", [1, 7, 30, 90])
def test_heatmap_has_one_entry_per_day(days):
    heatmap = activity_heatmap([], NOW, days=days)

    assert len(heatmap) == days
    assert heatmap[-1].date == date(2024, 6, 12)
    for earlier, later in zip(heatmap, heatmap[1:]):
        assert later.date - earlier.date == timedelta(days=1)


def test_heatmap_default_is_thirty_days():
    heatmap = activity_heatmap([make_record()], NOW)
    assert len(heatmap) == 30
    assert heatmap[0].date == date(2024, 5, 14)


def test_heatmap_aggregates_per_day():
    sessions = [
        make_record(days_ago=0, hour=9, minutes=25),
        make_record(days_ago=0, hour=11, minutes=15),
        make_record(days_ago=3, minutes=50),
    ]

    by_date = {e.date: e for e in activity_heatmap(sessions, NOW, days=7)}

    assert by_date[date(2024, 6, 12)].count == 2
    assert by_date[date(2024, 6, 12)].minutes == 40
    assert by_date[date(2024, 6, 9)].count == 1
    assert by_date[date(2024, 6, 9)].minutes == 50
    assert by_date[date(2024, 6, 10)].count == 0


def test_heatmap_includes_incomplete_sessions():
    heatmap = activity_heatmap([make_record(completed=False)], NOW, days=1)
    assert heatmap[0].count == 1


def test_heatmap_ignores_sessions_outside_window():
    sessions = [make_record(days_ago=7), make_record(days_ago=-1), make_record(start_time="")]
    heatmap = activity_heatmap(sessions, NOW, days=7)
    assert sum(e.count for e in heatmap) == 0


def test_heatmap_is_idempotent():
    sessions = [make_record(days_ago=d) for d in range(0, 40, 3)]
    assert activity_heatmap(sessions, NOW) == activity_heatmap(sessions, NOW)


def test_heatmap_ends_on_local_date():
    # Just after midnight UTC it is still the previous evening in Los Angeles
    now = datetime(2024, 6, 12, 0, 30, tzinfo=timezone.utc).astimezone(
        ZoneInfo("America/Los_Angeles")
    )
    heatmap = activity_heatmap([], now, days=3)
    assert [e.date for e in heatmap] == [date(2024, 6, 9), date(2024, 6, 10), date(2024, 6, 11)]


def test_heatmap_rejects_empty_window():
    with pytest.raises(ValueError):
        activity_heatmap([], NOW, days=0)
