# durood_tracker/streaks.py
from datetime import date, timedelta
from typing import Iterable, Mapping, Tuple

from .models.durood import DuroodEntry


def _counts_by_day(entries) -> Mapping[date, int]:
    counts = {}
    for entry in entries:
        if isinstance(entry, DuroodEntry):
            day, count = entry.entry_date, entry.count
        else:
            day, count = entry
        counts[day] = counts.get(day, 0) + int(count or 0)
    return counts


def calculate_streak(entries: Iterable, today: date) -> int:
    """
    Consecutive days ending today with a count above zero.

    `entries` are DuroodEntry rows or (date, count) pairs in any order.
    No qualifying entry today means no streak, whatever came before.
    """
    counts = _counts_by_day(entries)
    streak = 0
    day = today
    while counts.get(day, 0) > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(entries: Iterable) -> int:
    days = sorted(d for d, c in _counts_by_day(entries).items() if c > 0)
    best = run = 0
    previous = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def streak_summary(entries: Iterable, today: date) -> Tuple[int, int]:
    entries = list(entries)
    return calculate_streak(entries, today), longest_streak(entries)
