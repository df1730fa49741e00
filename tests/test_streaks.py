from datetime import date, timedelta

from durood_tracker.streaks import calculate_streak, longest_streak, streak_summary

TODAY = date(2025, 3, 10)


def _day(offset: int) -> date:
    return TODAY - timedelta(days=offset)


def test_three_consecutive_days() -> None:
    entries = [(_day(0), 5), (_day(1), 8), (_day(2), 6)]
    assert calculate_streak(entries, TODAY) == 3


def test_gap_yesterday_stops_the_streak() -> None:
    entries = [(_day(0), 5), (_day(2), 6)]
    assert calculate_streak(entries, TODAY) == 1


def test_no_entry_today_means_no_streak() -> None:
    entries = [(_day(1), 8), (_day(2), 6), (_day(3), 4)]
    assert calculate_streak(entries, TODAY) == 0


def test_zero_count_does_not_qualify() -> None:
    entries = [(_day(0), 3), (_day(1), 0), (_day(2), 9)]
    assert calculate_streak(entries, TODAY) == 1
    assert calculate_streak([(_day(0), 0)], TODAY) == 0


def test_order_does_not_matter() -> None:
    entries = [(_day(2), 1), (_day(0), 1), (_day(1), 1)]
    assert calculate_streak(entries, TODAY) == 3


def test_streak_crosses_month_boundary() -> None:
    today = date(2025, 3, 1)
    entries = [(date(2025, 3, 1), 1), (date(2025, 2, 28), 1), (date(2025, 2, 27), 1)]
    assert calculate_streak(entries, today) == 3


def test_longest_streak() -> None:
    entries = [
        (_day(0), 1),
        (_day(5), 2),
        (_day(6), 2),
        (_day(7), 2),
        (_day(8), 2),
        (_day(10), 1),
    ]
    assert longest_streak(entries) == 4
    assert streak_summary(entries, TODAY) == (1, 4)


def test_empty_history() -> None:
    assert calculate_streak([], TODAY) == 0
    assert longest_streak([]) == 0
