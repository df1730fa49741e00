# durood_tracker/tokens.py
"""
Single-use account tokens (password reset, email verification).

Raw tokens only ever leave the server inside an email link; the database
keeps their sha256 digest. A lookup returns exactly one of TokenValid,
TokenExpired, TokenNotFound or TokenConsumed.
"""
import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple, Union

from .models.password_reset import PasswordReset
from .models.user import User
from .time_utils import utc_now


@dataclass(frozen=True)
class TokenValid:
    record: Any


@dataclass(frozen=True)
class TokenExpired:
    pass


@dataclass(frozen=True)
class TokenNotFound:
    pass


@dataclass(frozen=True)
class TokenConsumed:
    pass


TokenLookup = Union[TokenValid, TokenExpired, TokenNotFound, TokenConsumed]


def hash_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def generate_token(ttl: timedelta, now: Optional[datetime] = None) -> Tuple[str, str, datetime]:
    """Returns (raw token, hashed token, expiry)."""
    raw = secrets.token_hex(32)
    return raw, hash_token(raw), (now or utc_now()) + ttl


def _classify(record, expires, consumed, now) -> TokenLookup:
    if record is None:
        return TokenNotFound()
    if consumed:
        return TokenConsumed()
    if expires is None or expires <= now:
        return TokenExpired()
    return TokenValid(record)


def lookup_password_reset(raw: str, now: Optional[datetime] = None) -> TokenLookup:
    if not raw:
        return TokenNotFound()
    record = PasswordReset.query.filter_by(token_hash=hash_token(raw)).first()
    if record is None:
        return TokenNotFound()
    return _classify(record, record.expires, record.used_at is not None, now or utc_now())


def lookup_email_verification(raw: str, now: Optional[datetime] = None) -> TokenLookup:
    if not raw:
        return TokenNotFound()
    user = User.query.filter_by(email_verification_token=hash_token(raw)).first()
    if user is None:
        return TokenNotFound()
    return _classify(user, user.email_verification_expires, bool(user.email_verified), now or utc_now())
