from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError

from durood_tracker import db
from durood_tracker.counter import (
    get_current_total,
    initialize_total_counter,
    reset_total_counter,
    update_total_counter,
)
from durood_tracker.errors import NotFoundError, ValidationError
from durood_tracker.models.durood import DailyRanking, DuroodEntry, TotalCounter
from durood_tracker.models.user import User
from durood_tracker.recitations import add_recitations, count_for_day, delete_recitations


def _sum_entries() -> int:
    return int(db.session.query(db.func.coalesce(db.func.sum(DuroodEntry.count), 0)).scalar())


def test_app_start_seeds_counter(app) -> None:
    assert db.session.get(TotalCounter, "global") is not None
    assert get_current_total() == 0


def test_initialize_seeds_from_existing_entries(user) -> None:
    db.session.query(TotalCounter).delete()
    db.session.add(DuroodEntry(user_id=user.id, entry_date=date(2025, 1, 1), count=40))
    db.session.add(DuroodEntry(user_id=user.id, entry_date=date(2025, 1, 2), count=2))
    db.session.commit()

    initialize_total_counter()
    assert get_current_total() == 42

    # idempotent: an existing counter is left alone
    db.session.add(DuroodEntry(user_id=user.id, entry_date=date(2025, 1, 3), count=8))
    db.session.commit()
    initialize_total_counter()
    assert get_current_total() == 42


def test_update_creates_missing_counter(app) -> None:
    db.session.query(TotalCounter).delete()
    db.session.commit()

    assert update_total_counter(5) == 5
    assert update_total_counter(-2) == 3
    db.session.commit()
    assert get_current_total() == 3


def test_counter_tracks_every_write(user) -> None:
    day1, day2 = date(2025, 2, 1), date(2025, 2, 2)
    initial = get_current_total()

    deltas = []
    for day, n in [(day1, 10), (day1, 5), (day2, 7)]:
        _, total = add_recitations(user.id, day, n)
        deltas.append(n)
        assert total == initial + sum(deltas)
    db.session.commit()

    assert count_for_day(user.id, day1) == 15
    assert get_current_total() == initial + 22 == _sum_entries()

    total = delete_recitations(user.id, day1)
    db.session.commit()
    assert total == 7
    assert get_current_total() == _sum_entries() == 7


def test_one_entry_per_user_per_day(user) -> None:
    day = date(2025, 2, 1)
    add_recitations(user.id, day, 3)
    add_recitations(user.id, day, 4)
    db.session.commit()

    assert DuroodEntry.query.filter_by(user_id=user.id, entry_date=day).count() == 1


def test_reset_fixes_drift(user) -> None:
    add_recitations(user.id, date(2025, 2, 1), 12)
    db.session.commit()

    counter = db.session.get(TotalCounter, "global")
    counter.total = 999
    db.session.commit()
    assert get_current_total() == 999

    assert reset_total_counter() == 12
    assert get_current_total() == 12


def test_get_current_total_defaults_to_zero_on_read_failure(app, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise SQLAlchemyError("database is unavailable")

    monkeypatch.setattr("durood_tracker.counter.select", broken)
    assert get_current_total() == 0


def test_add_rejects_non_positive_counts(user) -> None:
    with pytest.raises(ValidationError):
        add_recitations(user.id, date(2025, 2, 1), 0)
    with pytest.raises(ValidationError):
        add_recitations(user.id, date(2025, 2, 1), -3)


def test_delete_missing_entry(user) -> None:
    with pytest.raises(NotFoundError):
        delete_recitations(user.id, date(2025, 2, 1))


def test_rankings_follow_writes(user) -> None:
    other = User(email="bilal@example.com", username="bilal")
    other.set_password("secret123")
    db.session.add(other)
    db.session.commit()

    day = date(2025, 2, 1)
    add_recitations(user.id, day, 10)
    add_recitations(other.id, day, 25)
    db.session.commit()

    ranks = DailyRanking.query.filter_by(ranking_date=day).order_by(DailyRanking.rank).all()
    assert [(r.username, r.count, r.rank) for r in ranks] == [("bilal", 25, 1), ("amina", 10, 2)]

    delete_recitations(other.id, day)
    db.session.commit()
    ranks = DailyRanking.query.filter_by(ranking_date=day).all()
    assert [(r.username, r.rank) for r in ranks] == [("amina", 1)]
