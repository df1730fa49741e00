# durood_tracker/routes/durood_routes.py

from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context
from flask_jwt_extended import jwt_required

from .. import db, get_broadcaster
from ..counter import get_current_total
from ..events import total_event_stream
from ..models.durood import DuroodEntry
from ..recitations import add_recitations, delete_recitations, get_entry
from .helpers import current_user_id, date_arg, int_or_none, json_body

durood_bp = Blueprint("durood", __name__)


def _commit_and_publish(total: int) -> None:
    """Commit the pending write, then broadcast its total in commit order."""
    broadcaster = get_broadcaster(current_app)
    with broadcaster.publishing():
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        try:
            broadcaster.publish(total)
        except Exception:
            current_app.logger.exception("[durood] failed to publish total update")


# ------------------------------
# GET /api/durood[?date=YYYY-MM-DD]
# ------------------------------
@durood_bp.route("", methods=["GET"])
@jwt_required()
def list_entries():
    user_id = current_user_id()
    raw_date = request.args.get("date")

    if raw_date:
        day = date_arg(raw_date)
        entry = get_entry(user_id, day)
        return jsonify({"date": day.isoformat(), "count": int(entry.count) if entry else 0}), 200

    rows = (
        DuroodEntry.query.filter_by(user_id=user_id)
        .order_by(DuroodEntry.entry_date.desc())
        .all()
    )
    return jsonify({"entries": [row.to_dict() for row in rows]}), 200


# ------------------------------
# POST /api/durood  {count, date?}
# ------------------------------
@durood_bp.route("", methods=["POST"])
@jwt_required()
def add_entry():
    user_id = current_user_id()
    data = json_body()

    count = int_or_none(data.get("count"))
    if count is None or count <= 0:
        return jsonify({"message": "Valid date and count are required"}), 400
    day = date_arg(data.get("date"))

    try:
        entry, total = add_recitations(user_id, day, count)
    except Exception:
        db.session.rollback()
        raise

    _commit_and_publish(total)
    return jsonify({"entry": entry.to_dict(), "total": total}), 200


# ------------------------------
# DELETE /api/durood?date=YYYY-MM-DD
# ------------------------------
@durood_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_entry():
    user_id = current_user_id()
    day = date_arg(request.args.get("date"), required=True)

    try:
        total = delete_recitations(user_id, day)
    except Exception:
        db.session.rollback()
        raise

    _commit_and_publish(total)
    return jsonify({"message": "Entry deleted successfully", "total": total}), 200


# ------------------------------
# Global total
# ------------------------------
@durood_bp.route("/total", methods=["GET"])
def total():
    return jsonify({"total": get_current_total()}), 200


@durood_bp.route("/total/stream", methods=["GET"])
def total_stream():
    cfg = current_app.config
    body = total_event_stream(
        get_broadcaster(current_app),
        get_current_total,
        keepalive_seconds=float(cfg.get("SSE_KEEPALIVE_SECONDS", 15)),
        retry_ms=int(cfg.get("SSE_RETRY_MS", 2000)),
    )
    return Response(
        stream_with_context(body),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "X-Accel-Buffering": "no",
        },
    )
