# durood_tracker/goals.py
"""
Daily goal and focus timer logic.

A goal goes created(false) -> completed(true) once the day's count reaches
it; changing the target re-opens it. Bonuses are only paid on the
false -> true transition, which is a conditional UPDATE so a second check
(or a concurrent one) cannot pay twice.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import update

from . import db
from .errors import NotFoundError, ValidationError
from .models.goals import DailySpin, GoalTimerSession
from .points import (
    GOAL_COMPLETION_POINTS,
    GOAL_SET_POINTS,
    TIMER_COMPLETION_POINTS,
    award_points,
)
from .recitations import count_for_day
from .time_utils import utc_now

MIN_GOAL = 1
MAX_GOAL = 10000
DEFAULT_TIMER_SECONDS = 300


def validate_goal(goal: Any) -> int:
    if isinstance(goal, bool) or not isinstance(goal, int):
        raise ValidationError("Invalid goal value")
    if goal < MIN_GOAL or goal > MAX_GOAL:
        raise ValidationError("Invalid goal value")
    return goal


def get_daily_goal(user_id: int, day: date) -> Optional[DailySpin]:
    return (
        DailySpin.query.filter_by(user_id=user_id, spin_date=day)
        .populate_existing()
        .first()
    )


def set_daily_goal(user_id: int, goal: Any, day: date) -> Tuple[DailySpin, bool]:
    """
    Create or change the goal for `day`. Returns (spin, created).
    Only creation earns points.
    """
    goal = validate_goal(goal)
    spin = get_daily_goal(user_id, day)

    if spin is not None:
        if spin.goal != goal:
            spin.goal = goal
            spin.completed = False
            db.session.flush()
        return spin, False

    spin = DailySpin(user_id=user_id, spin_date=day, goal=goal, completed=False)
    db.session.add(spin)
    db.session.flush()
    award_points(user_id, GOAL_SET_POINTS, "goal_set", f"Set daily goal of {goal}")
    return spin, True


def check_goal_completion(user_id: int, day: date) -> Dict[str, Any]:
    spin = get_daily_goal(user_id, day)
    if spin is None:
        raise NotFoundError("No daily goal set")

    if spin.completed:
        return {"completed": True, "message": "Goal already completed", "spin": spin.to_dict()}

    current = count_for_day(user_id, day)
    if current < spin.goal:
        return {
            "completed": False,
            "currentCount": current,
            "target": spin.goal,
            "remaining": spin.goal - current,
        }

    result = db.session.execute(
        update(DailySpin)
        .where(DailySpin.id == spin.id, DailySpin.completed.is_(False))
        .values(completed=True)
        .execution_options(synchronize_session=False)
    )
    spin = get_daily_goal(user_id, day)
    if result.rowcount == 0:
        return {"completed": True, "message": "Goal already completed", "spin": spin.to_dict()}

    award_points(
        user_id, GOAL_COMPLETION_POINTS, "goal_completion", f"Completed daily goal of {spin.goal}"
    )
    return {"completed": True, "spin": spin.to_dict(), "bonusPoints": GOAL_COMPLETION_POINTS}


def start_timer(
    user_id: int, day: date, duration: Optional[int] = None, started_at: Optional[datetime] = None
) -> GoalTimerSession:
    if duration is None:
        duration = DEFAULT_TIMER_SECONDS
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise ValidationError("duration must be a positive number of seconds")

    session = GoalTimerSession(
        user_id=user_id,
        session_date=day,
        duration=duration,
        started_at=started_at or utc_now(),
        completed=False,
    )
    db.session.add(session)
    db.session.flush()
    return session


def active_timer(user_id: int, day: date) -> Optional[GoalTimerSession]:
    return (
        GoalTimerSession.query.filter_by(user_id=user_id, session_date=day, completed=False)
        .order_by(GoalTimerSession.started_at.desc(), GoalTimerSession.id.desc())
        .populate_existing()
        .first()
    )


def complete_timer(
    user_id: int, day: date, completed_at: Optional[datetime] = None, duration: Optional[int] = None
) -> GoalTimerSession:
    session = active_timer(user_id, day)
    if session is None:
        raise NotFoundError("No active timer session found")

    values = {"completed": True, "completed_at": completed_at or utc_now()}
    if isinstance(duration, int) and not isinstance(duration, bool) and duration > 0:
        values["duration"] = duration

    result = db.session.execute(
        update(GoalTimerSession)
        .where(GoalTimerSession.id == session.id, GoalTimerSession.completed.is_(False))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("No active timer session found")

    award_points(user_id, TIMER_COMPLETION_POINTS, "timer_session", "Completed timer session")
    return db.session.get(GoalTimerSession, session.id, populate_existing=True)
