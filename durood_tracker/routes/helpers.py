# durood_tracker/routes/helpers.py
from typing import Any, Optional

from flask import request
from flask_jwt_extended import get_jwt_identity

from ..errors import ValidationError
from ..time_utils import local_today, parse_iso_date


def current_user_id() -> int:
    return int(get_jwt_identity())


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def safe_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def int_or_none(v: Any) -> Optional[int]:
    """Strict int: accepts ints and integral numeric strings, nothing else."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v.strip())
    return None


def date_arg(value, required: bool = False):
    """
    Parse a YYYY-MM-DD value, defaulting to today when absent.
    """
    if not value:
        if required:
            raise ValidationError("Date parameter is required")
        return local_today()
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValidationError("Invalid date, expected YYYY-MM-DD")
    return parsed
