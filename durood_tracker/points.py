# durood_tracker/points.py
"""
Points and levels.

Every 1000 points is one level, capped at level 5. All writes happen in the
caller's transaction; the caller commits.
"""
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import db
from .errors import ValidationError
from .models.user_level import PointsTransaction, UserLevel

logger = logging.getLogger(__name__)

LEVEL_STEP_POINTS = 1000
MAX_LEVEL = 5
LEVEL_TITLES = ("Bronze", "Silver", "Gold", "Diamond", "Platinum")

# Fixed awards
GOAL_SET_POINTS = 10
GOAL_COMPLETION_POINTS = 50
TIMER_COMPLETION_POINTS = 20

# Categories the app itself awards under. Callers may pass others.
POINT_CATEGORIES = (
    "durood",
    "prayer",
    "goal_set",
    "goal_completion",
    "timer_session",
    "achievement",
    "reward",
)

REWARD_COSTS = {
    "custom_dua": 500,
    "premium_features": 300,
    "exclusive_content": 200,
    "prayer_mat": 1500,
    "quran_book": 2000,
    "tasbih": 800,
    "dua_ceremony": 1000,
    "name_in_prayers": 250,
}


def level_for_points(points: int) -> int:
    level = (int(points or 0) // LEVEL_STEP_POINTS) + 1
    return max(1, min(MAX_LEVEL, level))


def title_for_level(level: int) -> str:
    if 1 <= level <= len(LEVEL_TITLES):
        return LEVEL_TITLES[level - 1]
    return LEVEL_TITLES[0]


def reward_cost(reward_id: str) -> Optional[int]:
    return REWARD_COSTS.get(reward_id)


def get_user_level(user_id: int, create: bool = True) -> Optional[UserLevel]:
    row = UserLevel.query.filter_by(user_id=user_id).populate_existing().first()
    if row is None and create:
        _ensure_user_level(user_id)
        row = UserLevel.query.filter_by(user_id=user_id).first()
    return row


def get_user_points(user_id: int) -> int:
    row = UserLevel.query.filter_by(user_id=user_id).populate_existing().first()
    return int(row.points) if row else 0


def award_points(user_id: int, amount: int, category: str, description: str) -> int:
    """
    Add `amount` to the user's points and return the new total.

    The increment is a single UPDATE so concurrent awards for one user
    never overwrite each other. Level and title follow from the new total.
    `category` is free-form (see POINT_CATEGORIES for the built-in ones)
    but must be non-empty.
    """
    category = (category or "").strip()
    if not category:
        raise ValidationError("points category is required")

    amount = int(amount)
    _ensure_user_level(user_id)

    db.session.execute(
        update(UserLevel)
        .where(UserLevel.user_id == user_id)
        .values(points=UserLevel.points + amount)
        .execution_options(synchronize_session=False)
    )
    row = _sync_level(user_id)

    logger.info(
        "Awarded %s points to user %s for %s (%s). Total: %s",
        amount, user_id, description, category, row.points,
    )
    _record_transaction(user_id, amount, category, description, row.points)
    return int(row.points)


def redeem_reward(user_id: int, cost: int, reward_name: str) -> bool:
    """
    Deduct `cost` points. Returns False, without touching anything,
    when the balance is below `cost`.
    """
    cost = int(cost)
    if cost <= 0:
        raise ValidationError("cost must be positive")

    result = db.session.execute(
        update(UserLevel)
        .where(UserLevel.user_id == user_id, UserLevel.points >= cost)
        .values(points=UserLevel.points - cost)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("User %s cannot afford %s (%s points)", user_id, reward_name, cost)
        return False

    row = _sync_level(user_id)
    logger.info(
        "User %s redeemed %s for %s points. Remaining: %s",
        user_id, reward_name, cost, row.points,
    )
    _record_transaction(user_id, -cost, "reward", f"Redeemed {reward_name}", row.points)
    return True


def _ensure_user_level(user_id: int) -> None:
    exists = db.session.execute(
        select(UserLevel.id).where(UserLevel.user_id == user_id)
    ).first()
    if exists:
        return
    try:
        with db.session.begin_nested():
            db.session.add(
                UserLevel(user_id=user_id, points=0, level=1, title=LEVEL_TITLES[0])
            )
    except IntegrityError:
        # created by a concurrent request
        pass


def _sync_level(user_id: int) -> UserLevel:
    row = db.session.execute(
        select(UserLevel)
        .where(UserLevel.user_id == user_id)
        .execution_options(populate_existing=True)
    ).scalar_one()
    row.level = level_for_points(row.points)
    row.title = title_for_level(row.level)
    db.session.flush()
    return row


def _record_transaction(user_id, amount, category, description, balance_after) -> None:
    try:
        with db.session.begin_nested():
            db.session.add(
                PointsTransaction(
                    user_id=user_id,
                    amount=amount,
                    category=category[:30],
                    description=(description or "")[:255],
                    balance_after=balance_after,
                )
            )
    except SQLAlchemyError:
        logger.exception("Failed to record points transaction for user %s", user_id)
