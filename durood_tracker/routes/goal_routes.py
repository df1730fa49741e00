# durood_tracker/routes/goal_routes.py

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..goals import check_goal_completion, get_daily_goal, set_daily_goal
from ..time_utils import local_today
from .helpers import current_user_id, json_body

goal_bp = Blueprint("goal", __name__)


@goal_bp.route("", methods=["POST"])
@jwt_required()
def set_goal():
    """
    Body: { "goal": 100 }  (1..10000)
    201 when today's goal is created, 200 when it already existed.
    """
    user_id = current_user_id()
    data = json_body()

    try:
        spin, created = set_daily_goal(user_id, data.get("goal"), local_today())
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"spin": spin.to_dict()}), 201 if created else 200


@goal_bp.route("/complete", methods=["POST"])
@jwt_required()
def complete_goal():
    user_id = current_user_id()

    try:
        result = check_goal_completion(user_id, local_today())
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify(result), 200


@goal_bp.route("/today", methods=["GET"])
@jwt_required()
def today_goal():
    spin = get_daily_goal(current_user_id(), local_today())
    return jsonify({"spin": spin.to_dict() if spin else None}), 200
