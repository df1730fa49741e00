# durood_tracker/models/prayer.py
from datetime import datetime
from .. import db

PRAYER_NAMES = ("fajr", "dhuhr", "asr", "maghrib", "isha")


class PrayerCompletion(db.Model):
    __tablename__ = "prayer_completions"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "prayer_date", "prayer_name", name="uq_prayer_completions_user_date_name"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    prayer_date = db.Column(db.Date, nullable=False)
    prayer_name = db.Column(
        db.Enum(*PRAYER_NAMES, name="prayer_name_enum"), nullable=False
    )
    completed = db.Column(db.Boolean, default=False, nullable=False)
    completed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "date": self.prayer_date.isoformat(),
            "prayer_name": self.prayer_name,
            "completed": bool(self.completed),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
