# durood_tracker/recitations.py
"""
Writes to durood entries. Each one moves the cached total by the same
signed amount and refreshes that day's rankings. Nothing here commits.
"""
from datetime import date
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from . import db
from .counter import get_current_total, update_total_counter
from .errors import NotFoundError, ValidationError
from .models.durood import DuroodEntry
from .rankings import update_daily_rankings
from .time_utils import utc_now


def get_entry(user_id: int, day: date) -> Optional[DuroodEntry]:
    return (
        DuroodEntry.query.filter_by(user_id=user_id, entry_date=day)
        .populate_existing()
        .first()
    )


def count_for_day(user_id: int, day: date) -> int:
    entry = get_entry(user_id, day)
    return int(entry.count) if entry else 0


def _bump(user_id: int, day: date, count: int) -> int:
    result = db.session.execute(
        update(DuroodEntry)
        .where(DuroodEntry.user_id == user_id, DuroodEntry.entry_date == day)
        .values(count=DuroodEntry.count + count, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def add_recitations(user_id: int, day: date, count: int) -> Tuple[DuroodEntry, int]:
    """
    Add `count` to the user's entry for `day`, creating it if needed.
    Returns the entry and the new global total.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise ValidationError("count must be a positive integer")

    if _bump(user_id, day, count) == 0:
        try:
            with db.session.begin_nested():
                db.session.add(DuroodEntry(user_id=user_id, entry_date=day, count=count))
        except IntegrityError:
            # a concurrent request created the row first
            _bump(user_id, day, count)

    new_total = update_total_counter(count)
    update_daily_rankings(day)
    return get_entry(user_id, day), new_total


def delete_recitations(user_id: int, day: date) -> int:
    """
    Remove the user's entry for `day`. Returns the new global total.
    """
    entry = (
        DuroodEntry.query.filter_by(user_id=user_id, entry_date=day)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if entry is None:
        raise NotFoundError("No entry for that date")

    removed = int(entry.count or 0)
    db.session.delete(entry)
    db.session.flush()

    new_total = update_total_counter(-removed) if removed else get_current_total()
    update_daily_rankings(day)
    return new_total
