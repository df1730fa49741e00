# durood_tracker/routes/profile_routes.py
import re

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from .. import db
from ..models.user import User
from .helpers import current_user_id, json_body

profile_bp = Blueprint("profile", __name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@profile_bp.route("", methods=["PUT"])
@jwt_required()
def update_profile():
    user_id = current_user_id()
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = json_body()

    username = data.get("username")
    email = data.get("email")
    display_name = data.get("display_name")
    current_password = data.get("currentPassword") or ""
    new_password = data.get("newPassword")

    if username is not None:
        username = username.strip()
        if len(username) < 3:
            return jsonify({"message": "Username must be at least 3 characters long"}), 400
        taken = User.query.filter(User.username == username, User.id != user.id).first()
        if taken:
            return jsonify({"message": "Username is already taken"}), 400
        user.username = username

    if email is not None:
        email = email.strip().lower()
        if not EMAIL_RE.match(email):
            return jsonify({"message": "Invalid email format"}), 400
        taken = User.query.filter(User.email == email, User.id != user.id).first()
        if taken:
            return jsonify({"message": "Email is already taken"}), 400
        if email != user.email:
            user.email = email
            # a new address has to be verified again
            user.email_verified = False

    if display_name is not None:
        user.display_name = display_name.strip()[:100] or user.username

    if new_password is not None:
        if not current_password or not user.check_password(current_password):
            return jsonify({"message": "Current password is incorrect"}), 400
        if len(new_password) < 6:
            return jsonify({"message": "password must be at least 6 characters"}), 400
        user.set_password(new_password)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"user": user.to_dict()}), 200
