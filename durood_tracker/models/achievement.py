# durood_tracker/models/achievement.py
from datetime import datetime
from .. import db


class UserAchievement(db.Model):
    """
    An achievement a user has unlocked. Rows are never removed, so an
    unlock sticks even if the stats behind it later drop.
    """
    __tablename__ = "user_achievements"
    __table_args__ = (
        db.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_achievement"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    achievement_id = db.Column(db.String(50), nullable=False)
    unlocked_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
