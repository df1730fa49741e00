# durood_tracker/routes/auth_routes.py

from datetime import timedelta
from urllib.parse import quote

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import create_access_token, jwt_required
from sqlalchemy import or_

from .. import db
from ..mailer import send_password_reset_email, send_verification_email
from ..models.password_reset import PasswordReset
from ..models.user import User
from ..time_utils import utc_now
from ..tokens import (
    TokenConsumed,
    TokenExpired,
    TokenValid,
    generate_token,
    lookup_email_verification,
    lookup_password_reset,
)
from .helpers import current_user_id, json_body

auth_bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6
FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, you will receive password reset instructions."
)


def _frontend_url(path: str) -> str:
    return current_app.config.get("FRONTEND_URL", "http://localhost:3000").rstrip("/") + path


def _issue_verification(user: User) -> str:
    ttl = timedelta(hours=current_app.config.get("EMAIL_VERIFICATION_TTL_HOURS", 24))
    raw, hashed, expires = generate_token(ttl)
    user.email_verification_token = hashed
    user.email_verification_expires = expires
    return _frontend_url(f"/auth/verify-email?token={raw}&email={quote(user.email)}")


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/register", methods=["POST"])
@auth_bp.route("/signup", methods=["POST"])
def register():
    data = json_body()

    email = (data.get("email") or "").strip().lower()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""  # do NOT strip passwords
    display_name = (data.get("display_name") or data.get("displayName") or "").strip()

    if not email or not username or not password:
        return jsonify({"message": "email, username and password are required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "password must be at least 6 characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"message": "email already in use"}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({"message": "username already in use"}), 400

    user = User(email=email, username=username, display_name=display_name or username)
    user.set_password(password)
    verification_url = _issue_verification(user)

    try:
        db.session.add(user)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Registration Error: {e}")
        return jsonify({"message": "Internal server error"}), 500

    # The account exists either way; a failed email can be resent later.
    try:
        send_verification_email(user.email, verification_url)
    except Exception:
        current_app.logger.exception(f"[auth/register] verification email failed for user_id={user.id}")

    access_token = create_access_token(identity=str(user.id))
    return jsonify({"token": access_token, "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Accepts:
      - { "email": "...", "password": "..." }
      - { "username": "...", "password": "..." }
      - { "identifier": "...", "password": "..." }  # email or username
    """
    data = json_body()

    identifier = (data.get("identifier") or data.get("email") or data.get("username") or "").strip()
    password = data.get("password") or ""

    if not identifier or not password:
        return jsonify({"message": "identifier and password are required"}), 400

    user = User.query.filter(
        or_(
            User.email == identifier.lower(),
            User.username == identifier,
        )
    ).first()

    if not user or not user.check_password(password):
        current_app.logger.info(f"[auth/login] failed login for identifier='{identifier}'")
        return jsonify({"message": "invalid credentials"}), 401

    access_token = create_access_token(identity=str(user.id))
    return jsonify({"token": access_token, "user": user.to_dict()}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"user": user.to_dict()}), 200


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    if not email:
        return jsonify({"message": "Email is required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user:
        # same answer as the success path
        return jsonify({"message": FORGOT_PASSWORD_MESSAGE}), 200

    ttl = timedelta(minutes=current_app.config.get("PASSWORD_RESET_TTL_MINUTES", 60))
    raw, hashed, expires = generate_token(ttl)
    reset = PasswordReset(email=email, token_hash=hashed, expires=expires)

    try:
        db.session.add(reset)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("[auth/forgot-password] could not store reset token")
        return jsonify({"message": "An error occurred while processing your request."}), 500

    try:
        send_password_reset_email(email, _frontend_url(f"/auth/reset-password?token={raw}"))
    except Exception:
        current_app.logger.exception(f"[auth/forgot-password] email failed for user_id={user.id}")
        # an unsent token is useless; drop it, but answer like every other case
        db.session.delete(reset)
        db.session.commit()

    return jsonify({"message": FORGOT_PASSWORD_MESSAGE}), 200


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    data = json_body()
    token = data.get("token") or ""
    password = data.get("password") or ""

    if not token or not password:
        return jsonify({"message": "Token and password are required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "password must be at least 6 characters"}), 400

    lookup = lookup_password_reset(token)
    if isinstance(lookup, TokenExpired):
        return jsonify({"message": "Reset token has expired"}), 400
    if isinstance(lookup, TokenConsumed):
        return jsonify({"message": "Reset token has already been used"}), 400
    if not isinstance(lookup, TokenValid):
        return jsonify({"message": "Invalid or expired reset token"}), 400

    reset = lookup.record
    user = User.query.filter_by(email=reset.email).first()
    if not user:
        db.session.delete(reset)
        db.session.commit()
        return jsonify({"message": "Invalid or expired reset token"}), 400

    try:
        user.set_password(password)
        reset.used_at = utc_now()
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("[auth/reset-password] failed to update password")
        return jsonify({"message": "An error occurred while resetting your password."}), 500

    try:
        db.session.delete(reset)
        db.session.commit()
    except Exception:
        # password already changed; the row stays marked as used
        db.session.rollback()
        current_app.logger.exception("[auth/reset-password] failed to delete used token")

    return jsonify({"message": "Password reset successfully"}), 200


@auth_bp.route("/verify-email", methods=["POST"])
def verify_email():
    data = json_body()
    token = data.get("token") or ""
    if not token:
        return jsonify({"message": "Verification token is required"}), 400

    lookup = lookup_email_verification(token)
    if isinstance(lookup, TokenConsumed):
        return jsonify({"message": "Email is already verified"}), 400
    if not isinstance(lookup, TokenValid):
        return jsonify({"message": "Invalid or expired verification token"}), 400

    user = lookup.record
    user.email_verified = True
    user.email_verification_token = None
    user.email_verification_expires = None
    db.session.commit()

    return jsonify({"message": "Email verified successfully"}), 200


@auth_bp.route("/resend-verification", methods=["POST"])
def resend_verification():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    if not email:
        return jsonify({"message": "Email is required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user:
        return jsonify({"message": "User not found"}), 404

    if user.email_verified:
        return jsonify({"message": "Email is already verified"}), 400

    verification_url = _issue_verification(user)
    db.session.commit()

    try:
        send_verification_email(user.email, verification_url)
    except Exception:
        current_app.logger.exception(f"[auth/resend-verification] email failed for user_id={user.id}")
        return jsonify({"message": "Failed to send verification email. Please try again."}), 500

    return jsonify({"message": "Verification email sent successfully"}), 200
