# durood_tracker/time_utils.py
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from flask import current_app, has_app_context

DEFAULT_UTC_OFFSET_HOURS = 5  # Asia/Karachi, no DST


def app_timezone() -> timezone:
    hours = DEFAULT_UTC_OFFSET_HOURS
    if has_app_context():
        hours = int(current_app.config.get("APP_UTC_OFFSET_HOURS", hours))
    return timezone(timedelta(hours=hours))


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_date_for(moment: datetime) -> date:
    """
    Calendar date of `moment` at the app offset. Naive datetimes are UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(app_timezone()).date()


def local_today() -> date:
    return local_date_for(datetime.now(timezone.utc))


def parse_iso_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def parse_iso_datetime(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into naive UTC. Returns None when invalid.
    """
    if not value:
        return None
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
