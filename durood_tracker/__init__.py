# durood_tracker/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config import Config

db = SQLAlchemy()
jwt = JWTManager()

BROADCASTER_KEY = "total_broadcaster"


def create_app(config_class=Config, broadcaster=None):
    """
    Build the app. `broadcaster` is the TotalBroadcaster that feeds the live
    total stream; one is created when not given. Close it at shutdown.
    """
    from .events import TotalBroadcaster

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: allow the web client to call /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.extensions[BROADCASTER_KEY] = broadcaster or TotalBroadcaster()

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Missing or invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # Domain errors -> JSON
    # -----------------------------
    from .errors import DuroodTrackerError

    @app.errorhandler(DuroodTrackerError)
    def domain_error(err):
        db.session.rollback()
        return jsonify({"message": err.message}), err.status_code

    @app.errorhandler(Exception)
    def unhandled_error(err):
        if isinstance(err, HTTPException):
            return err
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {err}")
        return jsonify({"message": "Internal server error"}), 500

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.profile_routes import profile_bp
    from .routes.dashboard_routes import dashboard_bp
    from .routes.durood_routes import durood_bp
    from .routes.goal_routes import goal_bp
    from .routes.timer_routes import timer_bp
    from .routes.points_routes import points_bp
    from .routes.prayer_routes import prayers_bp
    from .routes.rankings_routes import rankings_bp
    from .routes.users_routes import users_bp
    from .routes.achievements_routes import achievements_bp
    from .routes.duas_routes import duas_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")
    app.register_blueprint(durood_bp, url_prefix="/api/durood")
    app.register_blueprint(goal_bp, url_prefix="/api/goal")
    app.register_blueprint(timer_bp, url_prefix="/api/timer")
    app.register_blueprint(points_bp, url_prefix="/api/points")
    app.register_blueprint(prayers_bp, url_prefix="/api/prayers")
    app.register_blueprint(rankings_bp, url_prefix="/api/rankings")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(achievements_bp, url_prefix="/api/achievements")
    app.register_blueprint(duas_bp, url_prefix="/api/duas")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    from . import models  # noqa: F401  (register tables)
    from .counter import initialize_total_counter

    with app.app_context():
        db.create_all()
        initialize_total_counter()

    return app


def get_broadcaster(app):
    return app.extensions[BROADCASTER_KEY]
