# config.py
import os
from datetime import timedelta


def _env_bool(name, default="0"):
    return (os.environ.get(name, default) or default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/durood_tracker"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT config
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    # "Today" for goals, timers and streaks is the date at this UTC offset
    APP_UTC_OFFSET_HOURS = int(os.environ.get("APP_UTC_OFFSET_HOURS", "5"))

    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

    # Email (plain SMTP)
    SMTP_HOST = os.environ.get("SMTP_HOST", "").strip()
    SMTP_PORT = int(os.environ.get("SMTP_PORT", "587") or "587")
    SMTP_USER = os.environ.get("SMTP_USER", "").strip()
    SMTP_PASS = os.environ.get("SMTP_PASS", "").strip()
    SMTP_FROM = os.environ.get("SMTP_FROM", "noreply@duroodtracker.com")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "1")

    PASSWORD_RESET_TTL_MINUTES = int(os.environ.get("PASSWORD_RESET_TTL_MINUTES", "60"))
    EMAIL_VERIFICATION_TTL_HOURS = int(os.environ.get("EMAIL_VERIFICATION_TTL_HOURS", "24"))

    # Server-sent events
    SSE_KEEPALIVE_SECONDS = float(os.environ.get("SSE_KEEPALIVE_SECONDS", "15"))
    SSE_RETRY_MS = int(os.environ.get("SSE_RETRY_MS", "2000"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SMTP_HOST = ""
    SSE_KEEPALIVE_SECONDS = 0.05
    LOG_LEVEL = "DEBUG"
