# durood_tracker/counter.py
"""
Cached global total of all durood counts.

Reading SUM(count) on every page load is O(n), so the running total lives in
the single `total_counter` row. Any write that changes a DuroodEntry count
must call update_total_counter() with the signed change, in the same
transaction.
"""
import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import db
from .models.durood import DuroodEntry, TotalCounter

logger = logging.getLogger(__name__)

COUNTER_ID = "global"


def _actual_total() -> int:
    return int(db.session.execute(select(func.coalesce(func.sum(DuroodEntry.count), 0))).scalar())


def initialize_total_counter() -> None:
    """Seed the counter from the entries table if it does not exist yet."""
    if db.session.get(TotalCounter, COUNTER_ID) is not None:
        return
    total = _actual_total()
    db.session.add(TotalCounter(id=COUNTER_ID, total=total))
    try:
        db.session.commit()
    except IntegrityError:
        # another worker seeded it first
        db.session.rollback()
        return
    logger.info("Initialized total counter at %s", total)


def get_current_total() -> int:
    try:
        total = db.session.execute(
            select(TotalCounter.total).where(TotalCounter.id == COUNTER_ID)
        ).scalar()
    except SQLAlchemyError:
        logger.exception("Failed to read total counter")
        db.session.rollback()
        return 0
    return int(total or 0)


def update_total_counter(delta: int) -> int:
    """
    Atomically add `delta` to the counter and return the new total.
    Does not commit.
    """
    delta = int(delta)
    result = db.session.execute(
        update(TotalCounter)
        .where(TotalCounter.id == COUNTER_ID)
        .values(total=TotalCounter.total + delta)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        try:
            with db.session.begin_nested():
                db.session.add(TotalCounter(id=COUNTER_ID, total=delta))
        except IntegrityError:
            db.session.execute(
                update(TotalCounter)
                .where(TotalCounter.id == COUNTER_ID)
                .values(total=TotalCounter.total + delta)
                .execution_options(synchronize_session=False)
            )

    return int(
        db.session.execute(
            select(TotalCounter.total).where(TotalCounter.id == COUNTER_ID)
        ).scalar()
    )


def reset_total_counter() -> int:
    """Recompute the counter from the entries table and overwrite it."""
    total = _actual_total()
    counter = db.session.get(TotalCounter, COUNTER_ID, populate_existing=True)
    if counter is None:
        db.session.add(TotalCounter(id=COUNTER_ID, total=total))
    else:
        counter.total = total
    db.session.commit()
    logger.info("Reset total counter to %s", total)
    return total
