# durood_tracker/routes/duas_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..duas import add_favorite, create_dua, list_duas, list_favorites, remove_favorite, seed_duas
from .helpers import current_user_id, int_or_none, json_body

duas_bp = Blueprint("duas", __name__)


def _dua_id_arg():
    data = json_body()
    return int_or_none(data.get("duaId", request.args.get("duaId")))


# ------------------------------
# Library
# ------------------------------
@duas_bp.route("", methods=["GET"])
def get_duas():
    """GET /api/duas[?category=morning] -> active duas by category, then order."""
    duas = list_duas(request.args.get("category"))
    return jsonify({"duas": [d.to_dict() for d in duas]}), 200


@duas_bp.route("", methods=["POST"])
@jwt_required()
def add_dua():
    """
    Body: { "title", "category", "arabic", "urdu", "english",
            "transliteration"?, "reference"?, "audioUrl"?, "order"? }
    """
    try:
        dua = create_dua(json_body())
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return jsonify({"dua": dua.to_dict()}), 201


@duas_bp.route("/seed", methods=["POST"])
@jwt_required()
def seed():
    try:
        created = seed_duas()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return jsonify({"created": created}), 200


# ------------------------------
# Favorites
# ------------------------------
@duas_bp.route("/favorites", methods=["GET"])
@jwt_required()
def get_favorites():
    favorites = list_favorites(current_user_id())
    return jsonify({"favorites": [f.to_dict() for f in favorites]}), 200


@duas_bp.route("/favorites", methods=["POST"])
@jwt_required()
def favorite():
    dua_id = _dua_id_arg()
    if dua_id is None:
        return jsonify({"message": "Dua ID is required"}), 400

    try:
        fav, created = add_favorite(current_user_id(), dua_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return jsonify({"favorite": fav.to_dict()}), 201 if created else 200


@duas_bp.route("/favorites", methods=["DELETE"])
@jwt_required()
def unfavorite():
    dua_id = _dua_id_arg()
    if dua_id is None:
        return jsonify({"message": "Dua ID is required"}), 400

    try:
        remove_favorite(current_user_id(), dua_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return jsonify({"message": "Favorite removed"}), 200
