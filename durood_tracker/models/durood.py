# durood_tracker/models/durood.py
from datetime import datetime
from .. import db


class DuroodEntry(db.Model):
    __tablename__ = "durood_entries"
    __table_args__ = (
        db.UniqueConstraint("user_id", "entry_date", name="uq_durood_entries_user_date"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    entry_date = db.Column(db.Date, nullable=False, index=True)
    count = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    user = db.relationship("User", backref="durood_entries")

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.entry_date.isoformat(),
            "count": int(self.count or 0),
        }


class TotalCounter(db.Model):
    """
    Cached SUM(durood_entries.count). Single row with id "global".
    """
    __tablename__ = "total_counter"

    id = db.Column(db.String(20), primary_key=True, default="global")
    total = db.Column(db.BigInteger, default=0, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class DailyRanking(db.Model):
    __tablename__ = "daily_rankings"
    __table_args__ = (
        db.UniqueConstraint("ranking_date", "user_id", name="uq_daily_rankings_date_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    ranking_date = db.Column(db.Date, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    username = db.Column(db.String(50), nullable=False)
    display_name = db.Column(db.String(100))
    count = db.Column(db.Integer, default=0, nullable=False)
    rank = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            "date": self.ranking_date.isoformat(),
            "user_id": self.user_id,
            "username": self.username,
            "display_name": self.display_name,
            "count": self.count,
            "rank": self.rank,
        }
