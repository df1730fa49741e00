# durood_tracker/routes/points_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.user_level import PointsTransaction
from ..points import (
    LEVEL_STEP_POINTS,
    MAX_LEVEL,
    award_points,
    get_user_level,
    get_user_points,
    redeem_reward,
    reward_cost,
)
from .helpers import current_user_id, int_or_none, json_body, safe_int

points_bp = Blueprint("points", __name__)


def _next_level_points(level: int):
    """Points needed to reach the next level, or None at the top."""
    if level >= MAX_LEVEL:
        return None
    return max(1, level) * LEVEL_STEP_POINTS


@points_bp.route("", methods=["GET"])
@jwt_required()
def get_points():
    return jsonify({"points": get_user_points(current_user_id())}), 200


@points_bp.route("", methods=["POST"])
@jwt_required()
def update_points():
    """
    Body:
      { "action": "award", "amount": 25, "description": "..." }
      { "action": "redeem", "rewardId": "tasbih", "rewardName": "Tasbih" }
    """
    user_id = current_user_id()
    data = json_body()
    action = data.get("action")

    if action == "award":
        amount = int_or_none(data.get("amount"))
        description = (data.get("description") or "").strip()
        if not amount or amount <= 0 or not description:
            return jsonify({"message": "Amount and description required"}), 400

        try:
            points = award_points(user_id, amount, "durood", description)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return jsonify({"points": points}), 200

    if action == "redeem":
        reward_id = data.get("rewardId")
        reward_name = data.get("rewardName")
        if not reward_id or not reward_name:
            return jsonify({"message": "Reward ID and name required"}), 400

        cost = reward_cost(reward_id)
        if not cost:
            return jsonify({"message": "Invalid reward"}), 400

        try:
            ok = redeem_reward(user_id, cost, reward_name)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        if not ok:
            return jsonify({"message": "Insufficient points"}), 400

        return jsonify({"success": True, "points": get_user_points(user_id)}), 200

    return jsonify({"message": "Invalid action"}), 400


@points_bp.route("/level", methods=["GET"])
@jwt_required()
def get_level():
    level = get_user_level(current_user_id())
    db.session.commit()

    payload = level.to_dict()
    payload["next_level_points"] = _next_level_points(level.level)
    return jsonify(payload), 200


@points_bp.route("/history", methods=["GET"])
@jwt_required()
def history():
    limit = max(1, min(safe_int(request.args.get("limit"), 20), 100))
    rows = (
        PointsTransaction.query.filter_by(user_id=current_user_id())
        .order_by(PointsTransaction.created_at.desc(), PointsTransaction.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"transactions": [r.to_dict() for r in rows]}), 200
