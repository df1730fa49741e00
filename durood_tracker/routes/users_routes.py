# durood_tracker/routes/users_routes.py
from flask import Blueprint, jsonify

from ..models.user import User

users_bp = Blueprint("users", __name__)


@users_bp.route("/count", methods=["GET"])
def user_count():
    return jsonify({"count": User.query.count()}), 200
