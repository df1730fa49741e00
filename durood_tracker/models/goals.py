# durood_tracker/models/goals.py
from datetime import datetime
from .. import db


class DailySpin(db.Model):
    """
    A user's recitation goal for one day.
    """
    __tablename__ = "daily_spins"
    __table_args__ = (
        db.UniqueConstraint("user_id", "spin_date", name="uq_daily_spins_user_date"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    spin_date = db.Column(db.Date, nullable=False)
    goal = db.Column(db.Integer, nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.spin_date.isoformat(),
            "goal": self.goal,
            "completed": bool(self.completed),
        }


class GoalTimerSession(db.Model):
    __tablename__ = "goal_timer_sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    session_date = db.Column(db.Date, nullable=False)
    duration = db.Column(db.Integer, default=300, nullable=False)  # seconds
    started_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime)
    completed = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.session_date.isoformat(),
            "duration": self.duration,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "completed": bool(self.completed),
        }
