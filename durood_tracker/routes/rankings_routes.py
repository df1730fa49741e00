# durood_tracker/routes/rankings_routes.py
from flask import Blueprint, jsonify, request

from .. import db
from ..models.durood import DailyRanking
from .helpers import date_arg, safe_int

rankings_bp = Blueprint("rankings", __name__)


@rankings_bp.route("", methods=["GET"])
def daily_rankings():
    day = date_arg(request.args.get("date"))
    limit = max(1, min(safe_int(request.args.get("limit"), 20), 100))

    rows = (
        DailyRanking.query.filter_by(ranking_date=day)
        .order_by(DailyRanking.rank.asc())
        .limit(limit)
        .all()
    )
    if rows:
        return jsonify({
            "date": day.isoformat(),
            "rankings": [r.to_dict() for r in rows],
            "total": len(rows),
        }), 200

    # Nothing for that day yet: fall back to the latest day with rankings
    latest = db.session.query(db.func.max(DailyRanking.ranking_date)).scalar()
    if latest is None:
        return jsonify({"date": day.isoformat(), "rankings": [], "total": 0}), 200

    rows = (
        DailyRanking.query.filter_by(ranking_date=latest)
        .order_by(DailyRanking.rank.asc())
        .limit(limit)
        .all()
    )
    return jsonify({
        "date": latest.isoformat(),
        "rankings": [r.to_dict() for r in rows],
        "total": len(rows),
        "note": "Showing most recent available rankings",
    }), 200
