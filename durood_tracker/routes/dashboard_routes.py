#durood_tracker/routes/dashboard_routes.py
from datetime import timedelta

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..counter import get_current_total
from ..goals import get_daily_goal
from ..models.durood import DuroodEntry
from ..models.user import User
from ..points import get_user_level
from ..streaks import streak_summary
from ..time_utils import local_today
from .helpers import current_user_id

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/overview", methods=["GET"])
@jwt_required()
def dashboard_overview():
    """
    Returns:
    {
      "user": {...},
      "today": {"date": "2025-03-01", "count": 120, "goal": {...} | null},
      "week": [{"date": "...", "count": 0}, ... 7 days, oldest first],
      "streak": {"current_streak_days": 3, "longest_streak_days": 9},
      "level": {"points": 1200, "level": 2, "title": "Silver"},
      "global_total": 123456
    }
    """
    user_id = current_user_id()
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    today = local_today()
    week_start = today - timedelta(days=6)

    entries = (
        DuroodEntry.query.filter_by(user_id=user.id)
        .order_by(DuroodEntry.entry_date.desc())
        .all()
    )
    counts = {e.entry_date: int(e.count or 0) for e in entries}
    current_streak, best_streak = streak_summary(entries, today)

    week = []
    for i in range(7):
        d = week_start + timedelta(days=i)
        week.append({"date": d.isoformat(), "count": counts.get(d, 0)})

    spin = get_daily_goal(user.id, today)
    level = get_user_level(user.id)
    db.session.commit()

    return jsonify({
        "user": user.to_dict(),
        "today": {
            "date": today.isoformat(),
            "count": counts.get(today, 0),
            "goal": spin.to_dict() if spin else None,
        },
        "week": week,
        "streak": {
            "current_streak_days": current_streak,
            "longest_streak_days": best_streak,
        },
        "level": level.to_dict(),
        "global_total": get_current_total(),
    }), 200
