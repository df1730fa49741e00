# durood_tracker/routes/achievements_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..achievements import evaluate_achievements
from .helpers import current_user_id

achievements_bp = Blueprint("achievements", __name__)


@achievements_bp.route("", methods=["GET"])
@jwt_required()
def list_achievements():
    """
    All achievements with the caller's progress. Anything reached since the
    last look is unlocked now and its points are paid.
    """
    user_id = current_user_id()

    try:
        items, newly_unlocked = evaluate_achievements(user_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({
        "achievements": items,
        "unlocked_count": sum(1 for a in items if a["unlocked"]),
        "newly_unlocked": newly_unlocked,
    }), 200
