# durood_tracker/routes/timer_routes.py

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..goals import complete_timer, start_timer
from ..time_utils import local_today, parse_iso_datetime
from .helpers import current_user_id, int_or_none, json_body

timer_bp = Blueprint("timer", __name__)


# ------------------------------
# POST /api/timer/start  {duration?, startedAt?}
# ------------------------------
@timer_bp.route("/start", methods=["POST"])
@jwt_required()
def start():
    user_id = current_user_id()
    data = json_body()

    if data.get("startedAt") and parse_iso_datetime(data["startedAt"]) is None:
        return jsonify({"message": "invalid startedAt"}), 400

    raw_duration = data.get("duration")
    duration = int_or_none(raw_duration)
    if raw_duration is not None and duration is None:
        return jsonify({"message": "duration must be a positive number of seconds"}), 400

    try:
        session = start_timer(
            user_id,
            local_today(),
            duration=duration,
            started_at=parse_iso_datetime(data.get("startedAt")),
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"timerSession": session.to_dict()}), 201


# ------------------------------
# POST /api/timer/complete  {duration?, completedAt?}
# ------------------------------
@timer_bp.route("/complete", methods=["POST"])
@jwt_required()
def complete():
    user_id = current_user_id()
    data = json_body()

    if data.get("completedAt") and parse_iso_datetime(data["completedAt"]) is None:
        return jsonify({"message": "invalid completedAt"}), 400

    try:
        session = complete_timer(
            user_id,
            local_today(),
            completed_at=parse_iso_datetime(data.get("completedAt")),
            duration=int_or_none(data.get("duration")),
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"timerSession": session.to_dict()}), 200
