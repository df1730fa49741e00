# durood_tracker/rankings.py
import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from . import db
from .models.durood import DailyRanking, DuroodEntry
from .models.user import User

logger = logging.getLogger(__name__)


def update_daily_rankings(ranking_date: date) -> None:
    """
    Rebuild the ranking rows for one date, highest count first.
    Best effort: failures are logged and the caller's work stands.
    """
    try:
        with db.session.begin_nested():
            rows = (
                db.session.query(DuroodEntry, User)
                .join(User, DuroodEntry.user_id == User.id)
                .filter(DuroodEntry.entry_date == ranking_date, DuroodEntry.count > 0)
                .order_by(DuroodEntry.count.desc(), DuroodEntry.updated_at.asc())
                .populate_existing()
                .all()
            )

            DailyRanking.query.filter_by(ranking_date=ranking_date).delete(
                synchronize_session=False
            )
            for rank, (entry, user) in enumerate(rows, start=1):
                db.session.add(
                    DailyRanking(
                        ranking_date=ranking_date,
                        user_id=user.id,
                        username=user.username,
                        display_name=user.display_name,
                        count=entry.count,
                        rank=rank,
                    )
                )
    except SQLAlchemyError:
        logger.exception("Failed to update daily rankings for %s", ranking_date)
