# durood_tracker/routes/prayer_routes.py

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.prayer import PRAYER_NAMES, PrayerCompletion
from ..time_utils import utc_now
from .helpers import current_user_id, date_arg, json_body, safe_int

prayers_bp = Blueprint("prayers", __name__)


@prayers_bp.route("", methods=["GET"])
@jwt_required()
def get_prayers():
    """
    GET /api/prayers?date=YYYY-MM-DD
    -> { "date": "...", "prayers": { "fajr": {"completed": true, "completed_at": "..."}, ... } }
    """
    day = date_arg(request.args.get("date"), required=True)
    rows = PrayerCompletion.query.filter_by(user_id=current_user_id(), prayer_date=day).all()

    prayers = {
        row.prayer_name: {
            "completed": bool(row.completed),
            "completed_at": row.completed_at.isoformat() if row.completed_at else None,
        }
        for row in rows
    }
    return jsonify({"date": day.isoformat(), "prayers": prayers}), 200


@prayers_bp.route("", methods=["POST"])
@jwt_required()
def set_prayer():
    """
    Body: { "date": "YYYY-MM-DD", "prayerName": "fajr", "completed": true }
    """
    user_id = current_user_id()
    data = json_body()

    prayer_name = (data.get("prayerName") or data.get("prayer_name") or "").strip().lower()
    if not data.get("date") or not prayer_name:
        return jsonify({"message": "Date and prayerName are required"}), 400
    if prayer_name not in PRAYER_NAMES:
        return jsonify({"message": "Invalid prayer name"}), 400

    completed = data.get("completed", False)
    if not isinstance(completed, bool):
        return jsonify({"message": "completed must be true or false"}), 400

    day = date_arg(data.get("date"), required=True)

    row = PrayerCompletion.query.filter_by(
        user_id=user_id, prayer_date=day, prayer_name=prayer_name
    ).first()
    if row is None:
        row = PrayerCompletion(user_id=user_id, prayer_date=day, prayer_name=prayer_name)
        db.session.add(row)

    row.completed = completed
    row.completed_at = utc_now() if completed else None

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"message": "Prayer completion updated successfully", "prayer": row.to_dict()}), 200


@prayers_bp.route("/history", methods=["GET"])
@jwt_required()
def history():
    """
    Completions grouped by date, newest first. ?limit caps the row count.
    """
    limit = max(1, min(safe_int(request.args.get("limit"), 30), 500))
    rows = (
        PrayerCompletion.query.filter_by(user_id=current_user_id())
        .order_by(PrayerCompletion.prayer_date.desc(), PrayerCompletion.completed_at.desc())
        .limit(limit)
        .all()
    )

    grouped = {}
    for row in rows:
        grouped.setdefault(row.prayer_date.isoformat(), []).append(
            {
                "prayer_name": row.prayer_name,
                "completed": bool(row.completed),
                "completed_at": row.completed_at.isoformat() if row.completed_at else None,
            }
        )

    history = [
        {
            "date": day,
            "prayers": items,
            "completed_count": sum(1 for p in items if p["completed"]),
        }
        for day, items in grouped.items()
    ]
    return jsonify({"history": history}), 200
