# durood_tracker/achievements.py
"""
Fixed achievement catalogue, unlocked from a user's activity.

Unlocks are recorded the first time they are noticed and pay the
achievement's points once. Nothing here commits.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from . import db
from .models.achievement import UserAchievement
from .models.durood import DuroodEntry
from .models.goals import DailySpin, GoalTimerSession
from .models.prayer import PRAYER_NAMES, PrayerCompletion
from .points import award_points
from .streaks import longest_streak
from .time_utils import utc_now

logger = logging.getLogger(__name__)

ACHIEVEMENTS = (
    # durood
    {"id": "first_durood", "name": "First Durood", "description": "Recite your first durood",
     "icon": "🤲", "category": "durood", "metric": "duroods", "requirement": 1, "points": 10, "rarity": "common"},
    {"id": "durood_10", "name": "Durood Beginner", "description": "Recite 10 duroods",
     "icon": "📿", "category": "durood", "metric": "duroods", "requirement": 10, "points": 25, "rarity": "common"},
    {"id": "durood_100", "name": "Durood Enthusiast", "description": "Recite 100 duroods",
     "icon": "🙏", "category": "durood", "metric": "duroods", "requirement": 100, "points": 50, "rarity": "rare"},
    {"id": "durood_500", "name": "Durood Devotee", "description": "Recite 500 duroods",
     "icon": "🕋", "category": "durood", "metric": "duroods", "requirement": 500, "points": 100, "rarity": "epic"},
    {"id": "durood_1000", "name": "Durood Master", "description": "Recite 1000 duroods",
     "icon": "⭐", "category": "durood", "metric": "duroods", "requirement": 1000, "points": 200, "rarity": "legendary"},
    # prayers
    {"id": "first_prayer", "name": "First Prayer", "description": "Complete your first daily prayer",
     "icon": "🕌", "category": "prayers", "metric": "prayers", "requirement": 1, "points": 15, "rarity": "common"},
    {"id": "prayer_10", "name": "Prayer Regular", "description": "Complete 10 prayers",
     "icon": "🕌", "category": "prayers", "metric": "prayers", "requirement": 10, "points": 30, "rarity": "common"},
    {"id": "prayer_50", "name": "Prayer Devotee", "description": "Complete 50 prayers",
     "icon": "🕋", "category": "prayers", "metric": "prayers", "requirement": 50, "points": 75, "rarity": "rare"},
    {"id": "prayer_100", "name": "Prayer Champion", "description": "Complete 100 prayers",
     "icon": "🌙", "category": "prayers", "metric": "prayers", "requirement": 100, "points": 150, "rarity": "epic"},
    {"id": "prayer_streak_7", "name": "Weekly Warrior",
     "description": "Complete all prayers for 7 consecutive days",
     "icon": "🔥", "category": "streak", "metric": "full_prayer_days", "requirement": 7, "points": 100, "rarity": "epic"},
    # goals and timers
    {"id": "first_goal", "name": "Goal Setter", "description": "Complete your first daily goal",
     "icon": "🎯", "category": "special", "metric": "goals", "requirement": 1, "points": 50, "rarity": "rare"},
    {"id": "goal_5", "name": "Goal Achiever", "description": "Complete 5 daily goals",
     "icon": "🏆", "category": "special", "metric": "goals", "requirement": 5, "points": 125, "rarity": "epic"},
    {"id": "timer_session", "name": "Focused Timer", "description": "Complete your first timer session",
     "icon": "⏰", "category": "special", "metric": "timers", "requirement": 1, "points": 25, "rarity": "common"},
)


def achievement_stats(user_id: int) -> Dict[str, int]:
    """The activity counters the catalogue's `metric` keys refer to."""
    duroods = db.session.query(
        func.coalesce(func.sum(DuroodEntry.count), 0)
    ).filter(DuroodEntry.user_id == user_id).scalar()

    prayers = PrayerCompletion.query.filter_by(user_id=user_id, completed=True).count()

    # days on which every prayer was completed
    full_days = (
        db.session.query(PrayerCompletion.prayer_date)
        .filter(PrayerCompletion.user_id == user_id, PrayerCompletion.completed.is_(True))
        .group_by(PrayerCompletion.prayer_date)
        .having(func.count(PrayerCompletion.id) >= len(PRAYER_NAMES))
        .all()
    )

    goals = DailySpin.query.filter_by(user_id=user_id, completed=True).count()
    timers = GoalTimerSession.query.filter_by(user_id=user_id, completed=True).count()

    return {
        "duroods": int(duroods or 0),
        "prayers": prayers,
        "full_prayer_days": longest_streak((row[0], 1) for row in full_days),
        "goals": goals,
        "timers": timers,
    }


def _record_unlock(user_id: int, achievement: Dict[str, Any], now: datetime) -> Optional[UserAchievement]:
    """Insert the unlock row; None when another request got there first."""
    row = UserAchievement(user_id=user_id, achievement_id=achievement["id"], unlocked_at=now)
    try:
        with db.session.begin_nested():
            db.session.add(row)
    except IntegrityError:
        return None

    award_points(
        user_id, achievement["points"], "achievement", f"Unlocked achievement: {achievement['name']}"
    )
    logger.info("User %s unlocked %s", user_id, achievement["id"])
    return row


def evaluate_achievements(
    user_id: int, now: Optional[datetime] = None
) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Returns (catalogue with per-user progress and unlock state,
    ids unlocked by this call).
    """
    now = now or utc_now()
    stats = achievement_stats(user_id)
    unlocked = {
        row.achievement_id: row
        for row in UserAchievement.query.filter_by(user_id=user_id).all()
    }

    newly_unlocked = []
    items = []
    for achievement in ACHIEVEMENTS:
        progress = stats[achievement["metric"]]
        row = unlocked.get(achievement["id"])

        if row is None and progress >= achievement["requirement"]:
            row = _record_unlock(user_id, achievement, now)
            if row is not None:
                newly_unlocked.append(achievement["id"])
            else:
                row = UserAchievement.query.filter_by(
                    user_id=user_id, achievement_id=achievement["id"]
                ).first()

        item = {k: v for k, v in achievement.items() if k != "metric"}
        item["progress"] = min(progress, achievement["requirement"])
        item["unlocked"] = row is not None
        item["unlocked_at"] = row.unlocked_at.isoformat() if row is not None else None
        items.append(item)

    return items, newly_unlocked
